"""Record datatypes and parsing helpers for the V8 engine log.

Only the records needed for symbolication are understood:

    code-creation,<type>,<addr>,<size>,"<name>"
    code-move,<from>,<to>
    code-delete,<addr>
    shared-library,"<path>",<start>,<end>
    tick,<pc>,<sp>,<vm state>[,<frame>...]

Address fields are hexadecimal, either absolute (``0x1234``) or a signed
delta from the previous address of the same stream (``+1a0`` / ``-20``).
"""

import csv
from dataclasses import dataclass
from v8sym.common import report

@dataclass(frozen=True)
class AddressField:
    """An address as written in the log, not yet decompressed."""
    value: int
    delta: bool

@dataclass(frozen=True)
class CodeCreation:
    symbol_type: str
    address: AddressField
    length: int
    name: str

@dataclass(frozen=True)
class CodeMove:
    from_address: AddressField
    to_address: AddressField

@dataclass(frozen=True)
class CodeDelete:
    address: AddressField

@dataclass(frozen=True)
class SharedLibrary:
    """Native library mapped at [start, end)."""
    path: str
    start: AddressField
    end: AddressField

@dataclass(frozen=True)
class Tick:
    """Profiling sample: program counter plus the captured stack frames."""
    pc: AddressField
    sp: AddressField
    vm_state: int
    stack: list[AddressField]

def split_record(line: str) -> list[str]:
    """Split a log line into fields, honouring double-quoted names."""
    try:
        rows = list(csv.reader([line]))
    except csv.Error as e:
        report(f"[-] unreadable record: {e}")
        return []
    return rows[0] if rows else []

def parse_address(raw: str) -> AddressField:
    """Parse an absolute or delta-encoded hex address.

    Raises:
        ValueError: If the field is not hexadecimal.
    """
    raw = raw.strip()
    if raw[:1] in ("+", "-"):
        return AddressField(int(raw, 16), True)
    return AddressField(int(raw, 16), False)

def _parse_length(raw: str) -> int:
    length = int(raw)
    if length < 0:
        raise ValueError(f"negative code size {length}")
    return length

def decompose_code_creation(fields: list[str]) -> CodeCreation | None:
    """Convert code-creation fields into a CodeCreation.

    Returns None when the record is missing required fields.
    """
    if len(fields) < 5 or not fields[1]:
        report("[-] invalid record when decomposing code-creation")
        return None

    try:
        return CodeCreation(fields[1], parse_address(fields[2]), _parse_length(fields[3]), fields[4])
    except ValueError as e:
        report(f"[-] invalid code-creation record: {e}")
        return None

def decompose_code_move(fields: list[str]) -> CodeMove | None:
    """Convert code-move fields into a CodeMove."""
    if len(fields) < 3:
        report("[-] invalid record when decomposing code-move")
        return None

    try:
        return CodeMove(parse_address(fields[1]), parse_address(fields[2]))
    except ValueError as e:
        report(f"[-] invalid code-move record: {e}")
        return None

def decompose_code_delete(fields: list[str]) -> CodeDelete | None:
    """Convert code-delete fields into a CodeDelete."""
    if len(fields) < 2:
        report("[-] invalid record when decomposing code-delete")
        return None

    try:
        return CodeDelete(parse_address(fields[1]))
    except ValueError as e:
        report(f"[-] invalid code-delete record: {e}")
        return None

def decompose_shared_library(fields: list[str]) -> SharedLibrary | None:
    """Convert shared-library fields into a SharedLibrary."""
    if len(fields) < 4 or not fields[1]:
        report("[-] invalid record when decomposing shared-library")
        return None

    try:
        return SharedLibrary(fields[1], parse_address(fields[2]), parse_address(fields[3]))
    except ValueError as e:
        report(f"[-] invalid shared-library record: {e}")
        return None

def decompose_tick(fields: list[str]) -> Tick | None:
    """Convert tick fields into a Tick.

    Empty trailing fields are ignored; a malformed stack frame rejects the
    whole sample.
    """
    if len(fields) < 4:
        report("[-] invalid record when decomposing tick")
        return None

    try:
        pc = parse_address(fields[1])
        sp = parse_address(fields[2])
        vm_state = int(fields[3])
        stack = [parse_address(f) for f in fields[4:] if f.strip()]
    except ValueError as e:
        report(f"[-] invalid tick record: {e}")
        return None

    return Tick(pc, sp, vm_state, stack)
