"""
operation.py — Search Operation Records
========================================
The search does not yield frames; it writes an operation log.  Each
Operation is one logical step (dequeue a node, check a neighbour, …)
and the ordered list of them is the canonical trace of a run.  The
animation engine replays the log on its own clock, so "when a step
happened" is decoupled from "when the user sees it".

Design decisions:
  - Operation is frozen.  The search is the only writer; the scheduler
    and the renderer are pure readers.
  - OperationLog is the mutable scratch-pad the search appends to,
    with one helper per kind so the message wording lives in one place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List

from grid.cell import Coord, INF


class OperationKind(Enum):
    INITIALIZE = "initialize"
    ENQUEUE    = "enqueue"
    DEQUEUE    = "dequeue"
    SKIP       = "skip"
    VISIT      = "visit"
    CHECK      = "check"
    UPDATE     = "update"
    FOUND      = "found"
    PATH       = "path"      # synthesised during replay, never logged by the search


# kinds that make the target cell pulse during replay
PULSING_KINDS = frozenset({OperationKind.VISIT, OperationKind.CHECK, OperationKind.UPDATE})


@dataclass(frozen=True)
class Operation:
    kind:     OperationKind
    position: Coord
    message:  str = ""

    def to_dict(self) -> dict:
        return {
            "kind":     self.kind.value,
            "position": {"x": self.position[0], "y": self.position[1]},
            "message":  self.message,
        }


def _fmt(distance: float) -> str:
    return "inf" if distance == INF else str(distance)


class OperationLog:
    """
    Append-only builder used inside the search.

    Usage:
        log = OperationLog()
        log.initialize((0, 0))
        log.enqueue((0, 0), 0)
        ops = log.build()
    """

    def __init__(self):
        self._ops: List[Operation] = []

    def _add(self, kind: OperationKind, pos: Coord, message: str) -> None:
        self._ops.append(Operation(kind, pos, message))

    # -- helpers --
    def initialize(self, pos: Coord) -> None:
        self._add(OperationKind.INITIALIZE, pos, "Setting start node distance to 0")

    def enqueue(self, pos: Coord, priority: float) -> None:
        self._add(OperationKind.ENQUEUE, pos, f"Enqueue start node with priority {_fmt(priority)}")

    def dequeue(self, pos: Coord, distance: float) -> None:
        x, y = pos
        self._add(OperationKind.DEQUEUE, pos, f"Dequeue node ({x},{y}) with distance {_fmt(distance)}")

    def skip(self, pos: Coord) -> None:
        self._add(OperationKind.SKIP, pos, "Node already visited, skipping")

    def visit(self, pos: Coord, distance: float) -> None:
        self._add(OperationKind.VISIT, pos, f"Mark node as visited, distance: {_fmt(distance)}")

    def check(self, pos: Coord, current: float, candidate: float) -> None:
        x, y = pos
        self._add(
            OperationKind.CHECK, pos,
            f"Checking neighbor ({x},{y}), current: {_fmt(current)}, new: {_fmt(candidate)}",
        )

    def update(self, pos: Coord, distance: float) -> None:
        self._add(OperationKind.UPDATE, pos, f"Update distance to {_fmt(distance)} and enqueue")

    def found(self, pos: Coord, distance: float) -> None:
        self._add(OperationKind.FOUND, pos, f"End node found! Total distance: {_fmt(distance)}")

    # -- access --
    def build(self) -> List[Operation]:
        return list(self._ops)

    def __len__(self) -> int:
        return len(self._ops)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._ops)


def path_operation(pos: Coord, index: int, total: int) -> Operation:
    x, y = pos
    return Operation(
        OperationKind.PATH, pos, f"Path node ({x},{y}), part {index + 1} of {total}"
    )
