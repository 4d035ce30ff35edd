"""Log processing for v8sym.

This module replays V8 log records in order, keeping the code symbol table
current, and resolves every tick against it. Resolved ticks are handed to
an OutputManager when one is configured.
"""

from collections import Counter
from pathlib import Path
from typing import Iterable, Optional
from v8sym.addr_decode import AddressDecoder
from v8sym.aliases import AliasTable
from v8sym.common import AddressSpan, Frame, ResolvedTick, report
from v8sym.messages import *
from v8sym.native import NativeSymbols
from v8sym.outman import OutputManager, UNKNOWN
from v8sym.sym_lookup import SymbolTable
from v8sym.symbol import V8Symbol, build_symbol

# V8 StateTag order, as written in the vm state column of ticks
VM_STATES = ("JS", "GC", "COMPILER", "OTHER", "EXTERNAL")

SHARED_LIBRARY = "SharedLibrary"

class LogProcessor:
    """Parsing session owning the decoder state, alias tables and symbol tables.

    Attributes:
        decoder: Address streams (`code`, `shared-library`, `pc`, `sp`, `stack`).
        symbol_types: Code kinds seen in code-creation records.
        actions: Record names seen in the log.
        vm_states: VM states reported by ticks.
        code: Live generated code.
        libraries: Native libraries announced by shared-library records.
        stats: Counters of processed records and misses.
    """
    def __init__(self, outman: Optional[OutputManager] = None, native: bool = True):
        self.outman = outman
        self.decoder = AddressDecoder()
        self.symbol_types = AliasTable("symbol-type")
        self.actions = AliasTable("action")
        self.vm_states = AliasTable("vm-state")
        for state in VM_STATES:
            self.vm_states.resolve(state)

        self.code = SymbolTable()
        self.libraries = SymbolTable()
        self.native = NativeSymbols() if native else None
        self.stats = Counter()

        self._abbrevs: dict[str, str] = {}
        self._handlers = {
            "code-creation": self._on_code_creation,
            "code-move": self._on_code_move,
            "code-delete": self._on_code_delete,
            "shared-library": self._on_shared_library,
            "tick": self._on_tick,
            "alias": self._on_alias,
        }

    def _address(self, stream: str, field: AddressField) -> int:
        if field.delta:
            return self.decoder.decode(stream, field.value)
        return self.decoder.set(stream, field.value)

    def _on_alias(self, fields: list[str]):
        if len(fields) < 3 or not fields[1] or not fields[2]:
            report("[-] invalid record when decomposing alias")
            return
        self._abbrevs[fields[1]] = fields[2]

    def _on_code_creation(self, fields: list[str]):
        rec = decompose_code_creation(fields)
        if not rec:
            return

        sym_type = self.symbol_types.resolve(rec.symbol_type)
        address = self._address("code", rec.address)
        self.code.insert(build_symbol(rec.name, sym_type, address, rec.length))

    def _on_code_move(self, fields: list[str]):
        rec = decompose_code_move(fields)
        if not rec:
            return

        frm = self._address("code", rec.from_address)
        to = self._address("code", rec.to_address)
        sym = self.code.lookup(frm)
        if sym is None:
            self.stats["code-move missed"] += 1
            return

        self.code.remove(sym)
        self.code.insert(sym.moved(to))

    def _on_code_delete(self, fields: list[str]):
        rec = decompose_code_delete(fields)
        if not rec:
            return

        sym = self.code.lookup(self._address("code", rec.address))
        if sym is None:
            self.stats["code-delete missed"] += 1
            return

        self.code.remove(sym)

    def _on_shared_library(self, fields: list[str]):
        rec = decompose_shared_library(fields)
        if not rec:
            return

        start = self._address("shared-library", rec.start)
        end = self._address("shared-library", rec.end)
        if end < start:
            report(f"[-] shared-library {rec.path} ends before it starts")
            return

        lib_type = self.symbol_types.resolve(SHARED_LIBRARY)
        self.libraries.insert(V8Symbol(rec.path, "", 0, lib_type, AddressSpan(start, end - start)))

    def _on_tick(self, fields: list[str]):
        rec = decompose_tick(fields)
        if not rec:
            return

        pc = self._address("pc", rec.pc)
        self._address("sp", rec.sp)
        frames = [self.resolve(pc)]
        frames += [self.resolve(self._address("stack", f)) for f in rec.stack]

        state = self.vm_states.lookup_by_value(rec.vm_state)
        vm_state = state.name if state else f"STATE{rec.vm_state}"

        tick = ResolvedTick(vm_state, frames)
        if not tick.top.resolved:
            self.stats["unresolved ticks"] += 1
        if self.outman:
            self.outman.write(tick)

    def resolve(self, address: int) -> Frame:
        """Resolve an address against generated code, then native libraries."""
        sym = self.code.lookup(address)
        if sym is not None:
            return Frame(address, sym.name, sym.resource_url, sym.resource_line_number, sym.symbol_type.name, True)

        lib = self.libraries.lookup(address)
        if lib is not None:
            offset = address - lib.address_span.address
            name = self.native.resolve(lib.name, offset) if self.native else None
            if not name:
                name = f"{Path(lib.name).name}!{hex(offset)}"
            return Frame(address, name, lib.name, 0, lib.symbol_type.name, True)

        return Frame(address, UNKNOWN, "", 0, "", False)

    def process_line(self, line: str):
        """Apply a single log line to the session state."""
        self.stats["lines"] += 1
        line = line.strip()
        if not line:
            return

        fields = split_record(line)
        if not fields:
            self.stats["skipped"] += 1
            return

        name = self._abbrevs.get(fields[0], fields[0])
        handler = self._handlers.get(name)
        if handler is None:
            self.stats["skipped"] += 1
            return

        action = self.actions.resolve(name)
        self.stats[action.name] += 1
        handler(fields)

    def process_lines(self, lines: Iterable[str]):
        for line in lines:
            self.process_line(line)

    def process_file(self, path: str):
        """Replay a whole log file."""
        with open(path, 'r', encoding="utf-8", errors="replace") as f:
            self.process_lines(f)
