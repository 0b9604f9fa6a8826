"""
algorithms/__init__.py — Search Registry
=========================================
    from algorithms import dijkstra, SearchResult, get_algorithm

REGISTRY maps a key to an AlgoInfo card.  The engine runs `fn` and the
"view source" popup reads `pseudocode`, `label` and the complexity
strings from the same card.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from algorithms.dijkstra import dijkstra, SearchResult, OPERATION_LINES, PSEUDOCODE as _dij_pc
from algorithms.operation import Operation, OperationKind, OperationLog, PULSING_KINDS
from algorithms.priority_queue import PriorityQueue, QueueEntry


@dataclass
class AlgoInfo:
    key:              str
    label:            str
    fn:               Callable[..., SearchResult]
    pseudocode:       List[str]
    complexity_time:  str = ""
    complexity_space: str = ""
    description:      str = ""

    def to_dict(self) -> dict:
        return {
            "key":              self.key,
            "label":            self.label,
            "pseudocode":       list(self.pseudocode),
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
        }


REGISTRY: Dict[str, AlgoInfo] = {
    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=dijkstra, pseudocode=_dij_pc,
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="Greedily settles the closest cell. Optimal for positive weights.",
    ),
}

DEFAULT_ALGORITHM = "dijkstra"


def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "DEFAULT_ALGORITHM",
    "get_algorithm",
    "dijkstra",
    "SearchResult",
    "OPERATION_LINES",
    "Operation",
    "OperationKind",
    "OperationLog",
    "PULSING_KINDS",
    "PriorityQueue",
    "QueueEntry",
]
