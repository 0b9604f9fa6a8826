from algorithms import PriorityQueue, QueueEntry


def test_ties_dequeue_in_insertion_order():
    pq = PriorityQueue()
    pq.enqueue("A", 5)
    pq.enqueue("B", 3)
    pq.enqueue("C", 3)
    assert [pq.dequeue().element for _ in range(3)] == ["B", "C", "A"]
    assert pq.is_empty()


def test_matches_stable_resort():
    """Same order as re-sorting the whole list after every insert."""
    entries = [((i * 7) % 5, f"n{i}") for i in range(40)]
    pq = PriorityQueue()
    reference = []
    for priority, element in entries:
        pq.enqueue(element, priority)
        reference.append((element, priority))
        reference.sort(key=lambda e: e[1])
    popped = []
    while not pq.is_empty():
        entry = pq.dequeue()
        popped.append((entry.element, entry.priority))
    assert popped == reference


def test_duplicates_are_kept():
    pq = PriorityQueue()
    pq.enqueue((1, 1), 4)
    pq.enqueue((1, 1), 2)
    assert len(pq) == 2
    assert pq.dequeue() == QueueEntry((1, 1), 2)
    assert pq.dequeue() == QueueEntry((1, 1), 4)


def test_dequeue_empty_returns_none():
    pq = PriorityQueue()
    assert pq.is_empty()
    assert pq.dequeue() is None
