"""Named shared regions and the Fibonacci producer and console sharing them."""

from __future__ import annotations

from dataclasses import dataclass, field

from xv6kit.ulib import atoi

SLOT_COUNT = 10
NAME_LEN = 20
DEFAULT_N = 10000

RUNNING = 0
PAUSED = 1
ENDED = 2

MENU = "1. fib <n>\n2. latest\n3. pause\n4. resume\n5. end\n"

_INT32 = 1 << 32


def _int32(value):
    value %= _INT32
    return value - _INT32 if value >= 1 << 31 else value


class SharedNameExists(KeyError):
    """Raised when a name is already shared."""


class SharedTableFull(RuntimeError):
    """Raised when every shared slot is taken."""


class SharedNotFound(KeyError):
    """Raised when no shared region has the name asked for."""


@dataclass
class _Slot:
    name: str = ""
    value: object = None
    size: int = 0


class SharedRegistry:
    """A process's table of named shared regions."""

    def __init__(self):
        self._slots = [_Slot() for _ in range(SLOT_COUNT)]

    def share(self, name, value, size):
        """Share value under name; return the slot index used."""
        if size < 0:
            raise ValueError("size must not be negative")
        if any(slot.name.startswith(name) for slot in self._slots):
            raise SharedNameExists(name)
        for index, slot in enumerate(self._slots):
            if slot.size == 0:
                stored = name[:NAME_LEN]
                slot.name = stored + slot.name[len(stored):]
                slot.value = value
                slot.size = size
                return index
        raise SharedTableFull("no free shared slot")

    def get(self, name):
        """Return the value shared under a name starting with name's first characters."""
        prefix = name[:NAME_LEN]
        for slot in self._slots:
            if slot.name.startswith(prefix):
                return slot.value
        raise SharedNotFound(name)


def fib_argument(command):
    """Index asked for by a "fib <n>" command, or -1 for any other command."""
    if command[:3] != "fib":
        return -1
    return atoi(command[4:])


@dataclass
class FibState:
    """Memory shared between the Fibonacci producer and its console."""

    n: int = DEFAULT_N
    values: list = field(default_factory=list)
    index: int = 0
    indicator: int = RUNNING
    _prev: int = field(default=0, init=False, repr=False)
    _cur: int = field(default=1, init=False, repr=False)
    _next: int = field(default=2, init=False, repr=False)
    _done: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        if self.n < 0:
            raise ValueError("n must not be negative")
        if not self.values:
            self.values = [0] * (self.n + 1)

    def step(self):
        """Compute the next number; False once finished, paused or ended."""
        if self.indicator != RUNNING or self._done:
            return False
        if self.n <= 1:
            self.index = self.n
            self.values[self.n] = self.n
            self._done = True
            return True
        self.values[0] = 0
        self.values[1] = 1
        res = _int32(self._prev + self._cur)
        self._prev, self._cur = self._cur, res
        self.values[self._next] = res
        self.index = self._next
        self._next += 1
        if self._next > self.n:
            self._done = True
        return True


def fib_values(n):
    """Fibonacci numbers 0..n as the producer computes them (32-bit)."""
    state = FibState(n)
    while state.step():
        pass
    return list(state.values)


class Console:
    """Interprets commands that inspect and steer a FibState."""

    def __init__(self, state):
        self.state = state
        self.finished = False

    def execute(self, command):
        """Run one command line and return the text it prints."""
        if command.endswith("\n"):
            command = command[:-1]
        state = self.state
        if command == "latest":
            return f"Last counted number: {state.index}\n"
        arg = fib_argument(command)
        if arg >= 0:
            out = ""
            if arg > state.index:
                out += (f"Fib sequence of index {arg} still not counted, "
                        f"last counted: {state.index}\n")
            if arg < len(state.values):
                out += f"Fib sequence of index {arg} = {state.values[arg]}\n"
            return out
        if command == "pause":
            state.indicator = PAUSED
            return "Pausing...\n"
        if command == "resume":
            state.indicator = RUNNING
            return "Resuming...\n"
        if command == "end":
            state.indicator = ENDED
            self.finished = True
            return ""
        return "Uknown command!\n" + MENU