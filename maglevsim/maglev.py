"""The Maglev lookup table: node membership, table population and display."""

import random
from typing import Optional

from .node import MAX_NODE_NAME_LEN, Node

MAX_NODES = 1000
DEFAULT_TABLE_SIZE = 65537
DISPLAY_SLOTS = 100

COLOR_PALETTE = (
    31, 32, 33, 34, 35, 36, 37,
    91, 92, 93, 94, 95, 96, 97,
    196, 197, 198, 199, 200, 201, 202, 203, 204, 205,
    46, 47, 48, 49, 50, 82, 83, 84, 85, 86,
    220, 221, 222, 223, 224, 225, 226, 227, 228, 229,
    21, 26, 27, 32, 33, 38, 39, 44, 45, 75,
    207, 213, 219, 225, 165, 171, 177, 183, 189, 195,
    51, 87, 123, 159, 14, 80, 116, 152, 188, 194,
    129, 135, 141, 147, 153, 93, 99, 105, 111, 117,
    166, 172, 178, 184, 190, 208, 214, 215, 216, 217,
    244, 245, 246, 247, 248, 249, 250, 251, 252, 253,
    11, 12, 13, 14, 15, 76, 77, 78, 79, 118, 119, 120, 121, 122,
)

__all__ = [
    "COLOR_PALETTE",
    "DEFAULT_TABLE_SIZE",
    "MAX_NODES",
    "MAX_NODE_NAME_LEN",
    "InvalidNodeNameError",
    "MaglevError",
    "MaglevTable",
    "NodeExistsError",
    "TooManyNodesError",
    "colorize",
    "is_prime",
    "next_prime",
]


class MaglevError(Exception):
    """Base class for lookup-table errors."""


class NodeExistsError(MaglevError):
    """A node with the same name is already present."""


class InvalidNodeNameError(MaglevError):
    """The node name is empty or too long."""


class TooManyNodesError(MaglevError):
    """The table already holds the maximum number of nodes."""


def is_prime(n: int) -> bool:
    """Return True if ``n`` is prime."""
    if n < 2:
        return False
    if n == 2:
        return True
    if n % 2 == 0:
        return False
    i = 3
    while i * i <= n:
        if n % i == 0:
            return False
        i += 2
    return True


def next_prime(n: int) -> int:
    """Return the smallest prime not less than ``n``."""
    while not is_prime(n):
        n += 1
    return n


def colorize(text: str, color_index: int) -> str:
    """Wrap ``text`` in the ANSI colour at ``color_index`` of the palette."""
    if not 0 <= color_index < len(COLOR_PALETTE):
        return text
    code = COLOR_PALETTE[color_index]
    if code <= 97:
        return f"\033[{code}m{text}\033[0m"
    return f"\033[38;5;{code}m{text}\033[0m"


class MaglevTable:
    """A Maglev consistent-hashing lookup table of prime size."""

    def __init__(
        self,
        table_size: int = DEFAULT_TABLE_SIZE,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.table_size = DEFAULT_TABLE_SIZE if table_size < 2 else next_prime(table_size)
        self.nodes: list[Node] = []
        self.lookup_table: list[Optional[int]] = [None] * self.table_size
        self._rng = rng if rng is not None else random.Random()

    def find_node_index(self, name: str) -> Optional[int]:
        """Return the position of the node called ``name``, or None."""
        return next(
            (index for index, node in enumerate(self.nodes) if node.name == name),
            None,
        )

    def add_node(self, name: str) -> Node:
        """Add a node and rebuild the table."""
        if not name:
            raise InvalidNodeNameError("Invalid node name")
        if self.find_node_index(name) is not None:
            raise NodeExistsError(f"Node '{name}' already exists")
        if len(self.nodes) >= MAX_NODES:
            raise TooManyNodesError("Maximum number of nodes reached")
        if len(name.encode("utf-8")) >= MAX_NODE_NAME_LEN:
            raise InvalidNodeNameError(f"Failed to create node '{name}'")
        node = Node(name, self.table_size, self.assign_color_index())
        self.nodes.append(node)
        self.rebuild()
        return node

    def remove_node(self, name: str) -> bool:
        """Remove a node and rebuild; return False if there was no such node."""
        index = self.find_node_index(name)
        if index is None:
            return False
        del self.nodes[index]
        self.rebuild()
        return True

    def rebuild(self) -> None:
        """Fill the lookup table by round-robin over the nodes' preference lists."""
        self.lookup_table = [None] * self.table_size
        if not self.nodes:
            return
        for node in self.nodes:
            node.reset_index()

        filled = 0
        while filled < self.table_size:
            progress = False
            for index, node in enumerate(self.nodes):
                if not node.is_active:
                    continue
                while (slot := node.next_preference()) is not None:
                    if self.lookup_table[slot] is None:
                        self.lookup_table[slot] = index
                        filled += 1
                        progress = True
                        break
                if filled >= self.table_size:
                    break
            if not progress:
                break

    def lookup(self, slot: int) -> Optional[str]:
        """Return the name of the node owning ``slot``, or None if unassigned."""
        index = self.lookup_table[slot]
        return None if index is None else self.nodes[index].name

    def distribution(self) -> dict[str, int]:
        """Return the number of slots owned by each node, in node order."""
        counts = [0] * len(self.nodes)
        for index in self.lookup_table:
            if index is not None and index < len(counts):
                counts[index] += 1
        return {node.name: count for node, count in zip(self.nodes, counts)}

    def _unassigned_count(self) -> int:
        return sum(1 for index in self.lookup_table if index is None)

    def max_node_name_length(self) -> int:
        """Return the display column width: longest name, clamped to 8..20."""
        longest = max((len(node.name) for node in self.nodes), default=1)
        return min(max(longest, 8), 20)

    def assign_color_index(self) -> int:
        """Pick a palette index, preferring ones no node uses yet."""
        used = {node.color_index for node in self.nodes}
        available = [i for i in range(len(COLOR_PALETTE)) if i not in used]
        if available:
            return self._rng.choice(available)
        return self._rng.randrange(len(COLOR_PALETTE))

    def render_nodes(self) -> str:
        """Return the listing of current nodes."""
        lines = [f"Current nodes ({len(self.nodes)} total):"]
        if not self.nodes:
            lines.append("  (no nodes)")
        else:
            lines.extend(f"  {i}: {node.name}" for i, node in enumerate(self.nodes))
        return "\n".join(lines) + "\n"

    def _render_cell(self, index: Optional[int], width: int, colored: bool) -> str:
        if index is None:
            return f"{'-':>{width}} "
        if index >= len(self.nodes):
            return f"{'?':>{width}} "
        node = self.nodes[index]
        if not colored:
            return f"{node.name:>{width}} "
        diff = width - len(node.name)
        left = int(diff / 2)
        right = diff - left
        return " " * abs(left) + colorize(node.name, node.color_index) + " " * abs(right) + " "

    def render_table(self, colored: bool = False) -> str:
        """Return the distribution summary and the first slots of the table."""
        suffix = " - Colored" if colored else ""
        out = [f"Maglev lookup table (size: {self.table_size}){suffix}:\n"]
        if not self.nodes:
            out.append("  (empty - no nodes)\n")
            return "".join(out)

        out.append("Distribution summary:\n")
        for node, count in zip(self.nodes, self.distribution().values()):
            label = colorize(node.name, node.color_index) if colored else node.name
            out.append(f"  {label}: {count} slots ({100.0 * count / self.table_size:.2f}%)\n")
        unassigned = self._unassigned_count()
        if unassigned:
            out.append(
                f"  Unassigned: {unassigned} slots "
                f"({100.0 * unassigned / self.table_size:.2f}%)\n"
            )

        show_count = min(self.table_size, DISPLAY_SLOTS)
        width = self.max_node_name_length()
        per_line = 10 if width <= 10 else 8
        out.append(f"\nFirst {show_count} slots:\n")
        for slot in range(show_count):
            if slot % per_line == 0:
                out.append(f"\n{slot:4d}: ")
            out.append(self._render_cell(self.lookup_table[slot], width, colored))
        out.append("\n")
        if self.table_size > DISPLAY_SLOTS:
            out.append(
                f"... (showing first {DISPLAY_SLOTS} out of "
                f"{self.table_size} total slots)\n"
            )
        return "".join(out)