"""Fixed-size, order-preserving batching of identifiers"""

from typing import List, Sequence, TypeVar


T = TypeVar('T')


def chunk(items: Sequence[T], max_size: int) -> List[List[T]]:
    """
    Split `items` into consecutive groups of at most `max_size`.

    Only the last group may be shorter. Concatenating the groups yields the
    input unchanged; an empty input yields no groups.

    Raises:
        ValueError: If max_size < 1
    """
    if max_size < 1:
        raise ValueError(f"max_size must be >= 1, got {max_size}")
    return [list(items[i:i + max_size]) for i in range(0, len(items), max_size)]
