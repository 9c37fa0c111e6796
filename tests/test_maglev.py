import random

import pytest

from maglevsim.maglev import (
    COLOR_PALETTE,
    DEFAULT_TABLE_SIZE,
    MAX_NODES,
    InvalidNodeNameError,
    MaglevError,
    MaglevTable,
    NodeExistsError,
    TooManyNodesError,
    colorize,
    is_prime,
    next_prime,
)


def make_table(size=37, names=()):
    table = MaglevTable(size, random.Random(1))
    for name in names:
        table.add_node(name)
    return table


@pytest.mark.parametrize("n", [2, 3, 5, 7, 37, 65537])
def test_primes(n):
    assert is_prime(n)


@pytest.mark.parametrize("n", [0, 1, 4, 9, 15, 65536])
def test_non_primes(n):
    assert not is_prime(n)


@pytest.mark.parametrize("n", [2, 36, 38, 100, 1000])
def test_next_prime_is_smallest_prime_at_least_n(n):
    p = next_prime(n)
    assert p >= n
    assert is_prime(p)
    assert not any(is_prime(k) for k in range(n, p))


def test_table_size_rounded_up_to_prime():
    assert MaglevTable(36).table_size == 37
    assert MaglevTable(37).table_size == 37


def test_small_size_uses_default():
    assert MaglevTable(0).table_size == DEFAULT_TABLE_SIZE
    assert MaglevTable(1).table_size == 65537


def test_new_table_is_empty():
    table = make_table()
    assert table.nodes == []
    assert all(entry is None for entry in table.lookup_table)
    assert table.distribution() == {}


def test_add_nodes_fills_every_slot():
    table = make_table(37, ["server1", "server2", "server3"])
    assert all(entry is not None for entry in table.lookup_table)
    assert set(table.lookup(slot) for slot in range(37)) <= {"server1", "server2", "server3"}
    assert sum(table.distribution().values()) == 37


def test_distribution_is_balanced():
    table = make_table(101, [f"server{i}" for i in range(7)])
    counts = table.distribution().values()
    assert max(counts) - min(counts) <= 1


def test_single_node_owns_everything():
    table = make_table(37, ["only"])
    assert table.distribution() == {"only": 37}


def test_duplicate_node_rejected():
    table = make_table(37, ["server1"])
    with pytest.raises(NodeExistsError):
        table.add_node("server1")
    assert len(table.nodes) == 1


def test_empty_name_rejected():
    with pytest.raises(InvalidNodeNameError):
        make_table().add_node("")


def test_too_long_name_rejected():
    table = make_table()
    with pytest.raises(InvalidNodeNameError):
        table.add_node("x" * 256)
    assert table.nodes == []


def test_too_many_nodes_rejected():
    table = make_table(2)
    for i in range(MAX_NODES):
        table.add_node(f"n{i}")
    with pytest.raises(TooManyNodesError):
        table.add_node("extra")
    assert len(table.nodes) == MAX_NODES


def test_errors_share_base_class():
    with pytest.raises(MaglevError):
        make_table(37, ["a"]).add_node("a")


def test_find_node_index():
    table = make_table(37, ["server1", "server2"])
    assert table.find_node_index("server2") == 1
    assert table.find_node_index("missing") is None


def test_remove_node_reassigns_slots():
    table = make_table(37, ["server1", "server2", "server3"])
    assert table.remove_node("server2") is True
    assert [node.name for node in table.nodes] == ["server1", "server3"]
    assert all(entry in (0, 1) for entry in table.lookup_table)
    assert set(table.distribution()) == {"server1", "server3"}


def test_remove_missing_node_is_ignored():
    table = make_table(37, ["server1"])
    before = list(table.lookup_table)
    assert table.remove_node("ghost") is False
    assert table.lookup_table == before


def test_remove_last_node_clears_table():
    table = make_table(37, ["server1"])
    table.remove_node("server1")
    assert all(entry is None for entry in table.lookup_table)


def test_rebuild_is_deterministic():
    first = make_table(101, ["a", "b", "c"])
    second = MaglevTable(101, random.Random(99))
    for name in ["a", "b", "c"]:
        second.add_node(name)
    assert first.lookup_table == second.lookup_table


def test_colors_are_unique_while_available():
    table = make_table(37, [f"s{i}" for i in range(20)])
    indices = [node.color_index for node in table.nodes]
    assert len(set(indices)) == len(indices)
    assert all(0 <= i < len(COLOR_PALETTE) for i in indices)


def test_colorize():
    assert colorize("x", -1) == "x"
    assert colorize("x", len(COLOR_PALETTE)) == "x"
    assert colorize("x", 0) == "\033[31mx\033[0m"
    assert colorize("x", 14) == "\033[38;5;196mx\033[0m"


def test_max_node_name_length_clamped():
    table = make_table()
    assert table.max_node_name_length() == 8
    table.add_node("abcdefghijkl")
    assert table.max_node_name_length() == len("abcdefghijkl")
    table.add_node("y" * 40)
    assert table.max_node_name_length() == 20


def test_render_nodes():
    table = make_table()
    assert table.render_nodes() == "Current nodes (0 total):\n  (no nodes)\n"
    table.add_node("server1")
    table.add_node("server2")
    assert table.render_nodes() == (
        "Current nodes (2 total):\n  0: server1\n  1: server2\n"
    )


def test_render_empty_table():
    assert make_table().render_table() == (
        "Maglev lookup table (size: 37):\n  (empty - no nodes)\n"
    )


def test_render_table_summary_and_slots():
    table = make_table(37, ["server1", "server2"])
    text = table.render_table()
    assert text.startswith("Maglev lookup table (size: 37):\nDistribution summary:\n")
    counts = table.distribution()
    for name, count in counts.items():
        assert f"  {name}: {count} slots ({100.0 * count / 37:.2f}%)" in text
    assert "\nFirst 37 slots:\n" in text
    assert "\n   0: " in text
    assert "Unassigned" not in text
    assert "showing first 100" not in text


def test_render_large_table_truncates():
    table = make_table(101, ["server1"])
    text = table.render_table()
    assert "First 100 slots:" in text
    assert text.endswith("... (showing first 100 out of 101 total slots)\n")


def test_render_colored_table():
    table = make_table(37, ["server1"])
    text = table.render_table(colored=True)
    node = table.nodes[0]
    assert text.startswith("Maglev lookup table (size: 37) - Colored:\n")
    assert colorize("server1", node.color_index) in text
    assert "\033[0m" in text