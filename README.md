# maglevsim

A small simulator for Maglev consistent hashing. Use it to build a lookup
table, add and remove backend nodes, and see how the table's slots are spread
across the nodes.

## Installation

```
pip install .
```

Install with `pip install .[test]` to get the test dependencies as well.

## Command line

Running `maglev-simulator` with no arguments opens an interactive prompt:

```
$ maglev-simulator
> init 37
> add server1
> add server2
> show nodes
> show maglev
> show maglev-color
> del server1
> quit
```

Commands:

| Command              | Effect                                                              |
|----------------------|---------------------------------------------------------------------|
| `init <size>`        | Create a new, empty lookup table. The size is rounded up to a prime; a size below 2 gives the default of 65537. |
| `add <name>`         | Add a node. It is an error if the node already exists.              |
| `del <name>`         | Remove a node. A missing node is ignored.                           |
| `show nodes`         | List the current nodes.                                             |
| `show maglev`        | Show slot counts per node and the first 100 slots.                  |
| `show maglev-color`  | The same, with each node shown in its own ANSI colour.              |
| `help`               | List the commands.                                                  |
| `quit` / `exit`      | Leave the simulator.                                                |

`add`, `del` and `show` need a table created with `init` first.

Where Python's `readline` module is available, the prompt keeps a history of
up to 100 lines in `~/.maglev_history` and completes command words with Tab.
End of input (Ctrl+D) also leaves the simulator.

You can also run a single command and exit:

```
maglev-simulator help
```

Or run a script of commands first. Blank lines and lines starting with `#` are
skipped, and each command is echoed before it runs. If the script reaches
`quit` or `exit`, the program stops there; otherwise the interactive prompt
opens after it. A script that cannot be opened gives exit status 1.

```
maglev-simulator -C commands.txt
```

Use `maglev-simulator -h` to see these options.

## Library use

```python
from maglevsim.maglev import MaglevTable

table = MaglevTable(37)
table.add_node("server1")
table.add_node("server2")

print(table.lookup(0))        # name of the node that owns slot 0
print(table.distribution())   # {"server1": ..., "server2": ...}
print(table.render_nodes())
print(table.render_table(colored=False))

table.remove_node("server1")  # True; False if there was no such node
```

`add_node` raises `NodeExistsError`, `InvalidNodeNameError` or
`TooManyNodesError` (more than 1000 nodes), all subclasses of `MaglevError`.
`MaglevTable` takes an optional `random.Random` as `rng`, used to pick each
node's display colour. `is_prime`, `next_prime` and `colorize` are in the same
module.

The preference list of a node comes from `maglevsim.node.generate_preference_list`,
and the hash functions (`djb2_hash`, `sdbm_hash`, `fnv1a_hash`, `hash_offset`,
`hash_skip`) are in `maglevsim.hashing`.

The shell itself is `maglevsim.cli.Shell`; `Shell.process_command` and
`Shell.execute_file` can be driven from code, writing to any text stream
passed as `out`.

## What it does not do

The simulator only builds and displays the lookup table. It does not hash
packets, connections or arbitrary keys to a node, it does not balance any
real traffic, and it does not save tables or nodes between runs.