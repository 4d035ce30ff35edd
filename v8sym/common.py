"""Shared value objects for v8sym."""

from contextlib import contextmanager
from dataclasses import dataclass

_reporter = print

def report(msg: str):
    """Emit a diagnostic line through the active reporter (print by default)."""
    _reporter(msg)

@contextmanager
def reporting_to(fn):
    """Send diagnostics to `fn` instead of print, e.g. a spinner's write."""
    global _reporter
    prev = _reporter
    _reporter = fn
    try:
        yield
    finally:
        _reporter = prev

@dataclass(frozen=True)
class AddressSpan:
    """A block of code occupying [address, address + length) in the code space."""
    address: int
    length: int

    def __post_init__(self):
        if self.length < 0:
            raise ValueError(f"negative span length: {self.length}")

    @property
    def end(self) -> int:
        return self.address + self.length

    def compare(self, other: "AddressSpan") -> int:
        """Order `other` relative to this span, treating any overlap as a match.

        Endpoints are inclusive, so touching spans compare equal. Returns 0
        on overlap, -1 when `other` starts before this span and 1 otherwise.
        This is not a strict total order once spans chain into each other.
        """
        a_start, a_end = other.address, other.end
        b_start, b_end = self.address, self.end

        if a_start <= b_start <= a_end:
            return 0
        if b_start <= a_start <= b_end:
            return 0
        if a_start < b_start:
            return -1
        return 1

    def contains(self, addr: int) -> bool:
        """Check whether `addr` is one of the bytes of this span."""
        if self.length == 0:
            return addr == self.address
        return self.address <= addr < self.end

    def overlaps(self, other: "AddressSpan") -> bool:
        """Check whether both spans share at least one byte.

        A zero-length span is a point probe at its address.
        """
        if self.length == 0:
            return other.contains(self.address)
        if other.length == 0:
            return self.contains(other.address)
        return self.address < other.end and other.address < self.end

    def __str__(self):
        return f"{hex(self.address)}-{hex(self.end)}"

@dataclass(frozen=True)
class Frame:
    """One resolved stack frame of a profiling sample.

    Unresolved addresses keep `resolved=False` and the name "(unknown)".
    """
    address: int
    name: str
    resource_url: str
    resource_line_number: int
    symbol_type: str
    resolved: bool

@dataclass(frozen=True)
class ResolvedTick:
    """Profiling sample with its frames, innermost first."""
    vm_state: str
    frames: list[Frame]

    @property
    def top(self) -> Frame:
        return self.frames[0]
