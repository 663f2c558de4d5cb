# xv6kit

Pure-Python models of the pieces of a small teaching Unix for x86.

| Module | What it holds |
| --- | --- |
| `xv6kit.mmu` | Memory-layout, parameter and trap constants; segment and gate descriptors (`seg`, `seg16`, `seg_cls`, `seg_asm`, `set_gate`); paging arithmetic (`pdx`, `ptx`, `pgaddr`, `pg_round_up`, `pg_round_down`, `pte_addr`, `pte_flags`); kernel address translation (`v2p`, `p2v`). |
| `xv6kit.elf` | `ElfHeader` and `ProgramHeader` with `from_bytes` / `to_bytes`, `program_headers(data)`, `ElfFormatError`. |
| `xv6kit.vm` | `PhysicalMemory`, a pool of simulated physical pages, and `PageTable`, a two-level page table kept in that memory; `setup_kvm` builds a table holding the kernel mappings. |
| `xv6kit.umalloc` | `Allocator`, a first-fit free-list allocator over a simulated heap. |
| `xv6kit.ulib` | C-style string helpers (`safestrcpy`, `strncpy`, `strcmp`, `atoi`, `gets`) and a minimal formatter (`format_int`, `xv6_format`, `fprintf`) understanding `%d`, `%x`, `%p`, `%s`, `%c` and `%%`. |
| `xv6kit.shell` | The shell's `Tokenizer` and `parse_cmd`, producing trees of `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd` and `BackCmd`; `bin_path` and `cd_target`. |
| `xv6kit.grep` | `match`, a tiny regular-expression matcher for `^ . * $`, and `grep` over a stream. |
| `xv6kit.textutils` | `word_count`, `cat`, `echo`, `fmtname` and `ls`, plus their command entry points. |
| `xv6kit.shared` | `SharedRegistry`, a per-process table of named shared regions; `FibState`, a step-by-step Fibonacci producer; `Console`, which inspects and steers it. |

No third-party dependencies are needed.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command-line tools

```
xv6-grep PATTERN [FILE ...]
xv6-wc [FILE ...]
xv6-cat [FILE ...]
xv6-echo WORD ...
xv6-ls [PATH ...]
```

`xv6-grep`, `xv6-wc` and `xv6-cat` read standard input when no file is
given; `xv6-ls` lists the current directory. `xv6-grep` understands only
`^`, `.`, `*` and `$`, prints only newline-terminated matching lines, and
stops at the first file it cannot open. `xv6-wc` prints
`lines words chars name` for each file. `xv6-ls` prints
`name type inode size` lines, with type 1 for a directory, 2 for a regular
file and 3 for anything else; a directory listing shows `.` and `..` first,
then the entries in sorted order.

## Library examples

Address arithmetic:

```python
from xv6kit.mmu import pdx, ptx, pg_round_up, pg_round_down

pdx(0x80400000)       # 0x201
ptx(0x00403000)       # 3
pg_round_up(4097)     # 8192
pg_round_down(4097)   # 4096
```

Formatting like the user-level `printf`:

```python
from xv6kit.ulib import xv6_format

xv6_format("%d %x %s", -5, 255, "hi")   # "-5 FF hi"
```

Matching lines:

```python
from xv6kit.grep import match

match("^ab*c$", "abbbc")   # True
match("^ab*c$", "abd")     # False
```

Parsing a shell line into a command tree:

```python
from xv6kit.shell import parse_cmd

tree = parse_cmd("cat README | grep xv6 > out; echo done &")
```

Malformed input raises `ShellSyntaxError`.

Page tables over simulated memory:

```python
from xv6kit.vm import PhysicalMemory, PageTable

memory = PhysicalMemory(0x200000, 0x400000)
pgdir = PageTable(memory)
size = pgdir.alloc_uvm(0, 3 * 4096)  # 12288
pgdir.copyout(100, b"hello")
pgdir.copyin(100, 5)                 # b"hello"
child = pgdir.copy_uvm(size)
pgdir.free()
```

Running out of pages raises `OutOfMemory`; conditions the kernel treats as
fatal (remapping a page, freeing a page twice) raise `KernelPanic`.

An allocator:

```python
from xv6kit.umalloc import Allocator

heap = Allocator(1 << 20)
addr = heap.malloc(100)
heap.free(addr)
```

`malloc` raises `MemoryError` once the heap limit is reached.

Shared regions and the Fibonacci console:

```python
from xv6kit.shared import SharedRegistry, FibState, Console, fib_values

registry = SharedRegistry()
registry.share("Index", 0, 4)
registry.get("Index")        # 0

fib_values(10)               # [0, 1, 1, 2, 3, 5, 8, 13, 21, 34, 55]

state = FibState(10)
state.step()
console = Console(state)
console.execute("latest")    # "Last counted number: 2\n"
console.execute("pause")     # "Pausing...\n"
```

Sharing a name twice raises `SharedNameExists`, a full table raises
`SharedTableFull`, and looking up an unknown name raises `SharedNotFound`.

## What the package does not do

- It runs no kernel: there is no scheduler, no processes, no system calls,
  no file system and no device access. Page tables, the allocator and the
  shared-region table work on simulated memory held in Python objects.
- The shell module parses command lines but does not run them; there is no
  interactive shell command.
- The Fibonacci producer and its console are classes driven by calls to
  `FibState.step` and `Console.execute`; there is no command that starts them.