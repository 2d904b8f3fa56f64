"""
Binary Max-Heap Module

Array-backed max-heap used by the settlement solver to always match the
largest outstanding creditor with the largest outstanding debtor.

Entries are (magnitude, payload) tuples. Only the magnitude takes part in
ordering, so payloads never need to be comparable. Ties between equal
magnitudes are broken arbitrarily.

Storage is a 0-indexed list forming a complete binary tree:
    parent(i) = (i - 1) // 2
    children(i) = 2i + 1, 2i + 2

Example Usage:
    from settlewise.utils.binary_heap import BinaryHeap

    heap = BinaryHeap()
    heap.insert((Decimal("30"), 0))
    heap.insert((Decimal("50"), 2))
    heap.extract_max()  # (Decimal('50'), 2)
"""

from typing import Any, List, Tuple

from settlewise.utils.exceptions import EmptyHeapError

HeapEntry = Tuple[Any, Any]


class BinaryHeap:
    """Max-heap of (magnitude, payload) pairs"""

    def __init__(self):
        self._heap: List[HeapEntry] = []

    def __len__(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return not self._heap

    def insert(self, entry: HeapEntry) -> None:
        """Append the entry and sift it up to restore heap order. O(log n)."""
        self._heap.append(entry)
        self._sift_up(len(self._heap) - 1)

    def peek_max(self) -> HeapEntry:
        if not self._heap:
            raise EmptyHeapError("peek from an empty heap")
        return self._heap[0]

    def extract_max(self) -> HeapEntry:
        """
        Remove and return the entry with the largest magnitude.

        The last element replaces the root and is sifted down. O(log n).

        Raises:
            EmptyHeapError: If the heap holds no entries
        """
        if not self._heap:
            raise EmptyHeapError("extract from an empty heap")

        top = self._heap[0]
        last = self._heap.pop()
        if self._heap:
            self._heap[0] = last
            self._sift_down(0)
        return top

    def _sift_up(self, index: int) -> None:
        element = self._heap[index]
        while index > 0:
            parent = (index - 1) // 2
            if self._heap[parent][0] >= element[0]:
                break
            self._heap[index] = self._heap[parent]
            index = parent
        self._heap[index] = element

    def _sift_down(self, index: int) -> None:
        element = self._heap[index]
        length = len(self._heap)

        while True:
            left = 2 * index + 1
            right = left + 1
            swap = None

            if left < length and self._heap[left][0] > element[0]:
                swap = left

            if right < length:
                right_magnitude = self._heap[right][0]
                if swap is None:
                    if right_magnitude > element[0]:
                        swap = right
                elif right_magnitude > self._heap[left][0]:
                    swap = right

            if swap is None:
                break

            self._heap[index] = self._heap[swap]
            index = swap

        self._heap[index] = element
