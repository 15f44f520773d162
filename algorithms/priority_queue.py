"""
priority_queue.py — Indexed Binary Min-Heap
============================================
heapq cannot decrease a key in place, so the classic algorithm uses this
instead: a binary heap array plus a node-id → array-index map that is
kept in sync on every swap.

    insert / extract_min / decrease_key   O(log n)
    contains                              O(1)
    snapshot_ordered                      O(n log n)  (display only)

Ties on equal distances come out in whatever order the heap leaves
them.  Algorithms must not rely on tie order for correctness.
"""

from typing import Dict, List, NamedTuple, Optional


class QueueEntry(NamedTuple):
    node_id:  str
    distance: float


class IndexedMinHeap:
    """
    Attributes:
        _heap : [QueueEntry] in binary-heap order.
        _pos  : {node_id: index into _heap}.
    """

    def __init__(self):
        self._heap: List[QueueEntry] = []
        self._pos:  Dict[str, int]   = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def insert(self, node_id: str, distance: float) -> None:
        if node_id in self._pos:
            raise ValueError(f"'{node_id}' is already queued")
        self._heap.append(QueueEntry(node_id, distance))
        idx = len(self._heap) - 1
        self._pos[node_id] = idx
        self._sift_up(idx)

    def extract_min(self) -> Optional[QueueEntry]:
        """Remove and return the smallest entry, or None when empty."""
        if not self._heap:
            return None
        top  = self._heap[0]
        last = self._heap.pop()
        del self._pos[top.node_id]
        if self._heap:
            self._heap[0] = last
            self._pos[last.node_id] = 0
            self._sift_down(0)
        return top

    def peek(self) -> Optional[QueueEntry]:
        return self._heap[0] if self._heap else None

    def decrease_key(self, node_id: str, distance: float) -> bool:
        """Lower node_id's key.  No-op (returns False) if absent or not smaller."""
        idx = self._pos.get(node_id)
        if idx is None or not distance < self._heap[idx].distance:
            return False
        self._heap[idx] = QueueEntry(node_id, distance)
        self._sift_up(idx)
        return True

    def contains(self, node_id: str) -> bool:
        return node_id in self._pos

    def is_empty(self) -> bool:
        return not self._heap

    def snapshot_ordered(self) -> List[QueueEntry]:
        """All entries sorted by distance, for trace display.  Does not consume."""
        return sorted(self._heap, key=lambda e: e.distance)

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __contains__(self, node_id: str) -> bool:
        return node_id in self._pos

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _sift_up(self, idx: int) -> None:
        while idx > 0:
            parent = (idx - 1) // 2
            if self._heap[parent].distance <= self._heap[idx].distance:
                break
            self._swap(idx, parent)
            idx = parent

    def _sift_down(self, idx: int) -> None:
        size = len(self._heap)
        while True:
            left, right = 2 * idx + 1, 2 * idx + 2
            smallest = idx
            if left < size and self._heap[left].distance < self._heap[smallest].distance:
                smallest = left
            if right < size and self._heap[right].distance < self._heap[smallest].distance:
                smallest = right
            if smallest == idx:
                return
            self._swap(idx, smallest)
            idx = smallest

    def _swap(self, i: int, j: int) -> None:
        self._heap[i], self._heap[j] = self._heap[j], self._heap[i]
        self._pos[self._heap[i].node_id] = i
        self._pos[self._heap[j].node_id] = j
