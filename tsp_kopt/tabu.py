import numpy as np
from numba import njit


@njit(cache=True)
def _tabu_push(mask: np.ndarray, queue: np.ndarray, cursor: np.ndarray, node: int) -> None:
    """
    Insert `node` into the ring-buffer backed tabu set.

    `cursor` holds (head, count); the oldest member sits at queue[head].
    """
    if node < 0 or node >= len(mask) or mask[node]:
        return
    capacity = len(queue)
    head = cursor[0]
    count = cursor[1]
    if count == capacity:
        mask[queue[head]] = False
        head = (head + 1) % capacity
        count -= 1
    queue[(head + count) % capacity] = node
    mask[node] = True
    cursor[0] = head
    cursor[1] = count + 1


class TabuList:
    """FIFO-bounded set of recently perturbed nodes."""

    def __init__(self, capacity: int, size: int):
        """
        Args:
            capacity: Maximum number of members; values below 1 are raised to 1.
            size: Number of nodes in the instance, i.e. the id domain 0..size-1.
        """
        self.capacity = max(1, int(capacity))
        self.mask = np.zeros(size, dtype=np.bool_)
        self.queue = np.full(self.capacity, -1, dtype=np.int64)
        self.cursor = np.zeros(2, dtype=np.int64)

    @classmethod
    def for_size(cls, n: int, divisor: int = 10) -> "TabuList":
        return cls(max(1, n // divisor), n)

    def contains(self, node: int) -> bool:
        return 0 <= node < len(self.mask) and bool(self.mask[node])

    def push(self, node: int) -> None:
        _tabu_push(self.mask, self.queue, self.cursor, node)

    def members(self) -> list:
        """Current members, oldest first."""
        head, count = int(self.cursor[0]), int(self.cursor[1])
        return [int(self.queue[(head + i) % self.capacity]) for i in range(count)]

    def __contains__(self, node) -> bool:
        return self.contains(node)

    def __len__(self) -> int:
        return int(self.cursor[1])
