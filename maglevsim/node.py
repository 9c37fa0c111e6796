"""Backend nodes and their Maglev preference lists."""

from dataclasses import dataclass, field
from typing import Optional

from .hashing import MASK32, hash_offset, hash_skip

MAX_NODE_NAME_LEN = 256


def generate_preference_list(name: str, table_size: int) -> list[int]:
    """Return the slot order in which node ``name`` claims lookup-table entries."""
    offset = hash_offset(name, table_size)
    skip = hash_skip(name, table_size)
    return [((offset + i * skip) & MASK32) % table_size for i in range(table_size)]


@dataclass
class Node:
    """A backend with its preference list and position within it."""

    name: str
    table_size: int
    color_index: int = -1
    is_active: bool = True
    preference_list: list[int] = field(init=False, repr=False)
    next_index: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("node name must not be empty")
        if len(self.name.encode("utf-8")) >= MAX_NODE_NAME_LEN:
            raise ValueError(
                f"node name must be shorter than {MAX_NODE_NAME_LEN} bytes"
            )
        self.preference_list = generate_preference_list(self.name, self.table_size)

    def reset_index(self) -> None:
        """Start again from the first preferred slot."""
        self.next_index = 0

    def next_preference(self) -> Optional[int]:
        """Return the next untried preferred slot, or None when all have been tried."""
        if self.next_index >= len(self.preference_list):
            return None
        slot = self.preference_list[self.next_index]
        self.next_index += 1
        return slot