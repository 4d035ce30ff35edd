"""Address range indexing for address-to-symbol resolution."""

from bisect import bisect_right
from html import escape
from typing import Iterator, Optional
from v8sym.common import AddressSpan, report
from v8sym.symbol import V8Symbol

class SymbolTable:
    """Interval map from live code ranges to the symbols occupying them.

    The table keeps parallel sorted lists of span starts and symbols, enabling
    O(log n) lookups via bisect. Stored spans never share a byte: inserting
    over an occupied range evicts whatever was there (last write wins).
    """
    def __init__(self):
        self.starts = []
        self.symbols = []

    def _overlapping(self, span: AddressSpan) -> list[int]:
        """Indices of stored symbols sharing a byte with `span`, ascending."""
        i = max(bisect_right(self.starts, span.address) - 1, 0)
        hits = []
        while i < len(self.starts) and self.starts[i] <= span.end:
            if self.symbols[i].address_span.overlaps(span):
                hits.append(i)
            i += 1
        return hits

    def _pop(self, indices: list[int]) -> list[V8Symbol]:
        removed = []
        for i in reversed(indices):
            self.starts.pop(i)
            removed.append(self.symbols.pop(i))
        removed.reverse()
        return removed

    def insert(self, symbol: V8Symbol) -> list[V8Symbol]:
        """Add a symbol, evicting any symbols whose ranges it overlaps.

        Returns:
            The evicted symbols, in address order.
        """
        span = symbol.address_span
        evicted = self._pop(self._overlapping(span))
        for old in evicted:
            report(f"[!] {symbol} overwrites {old}")

        i = bisect_right(self.starts, span.address)
        self.starts.insert(i, span.address)
        self.symbols.insert(i, symbol)
        return evicted

    def lookup(self, addr: int) -> Optional[V8Symbol]:
        """Return the symbol whose range contains `addr`, or None."""
        i = bisect_right(self.starts, addr) - 1
        if i >= 0 and self.symbols[i].address_span.contains(addr):
            return self.symbols[i]
        return None

    def remove(self, symbol: V8Symbol) -> bool:
        """Remove the symbols overlapping `symbol`'s range.

        Nothing is reported when the range is not occupied.
        """
        return bool(self._pop(self._overlapping(symbol.address_span)))

    def symbols_in_order(self) -> Iterator[V8Symbol]:
        return iter(list(self.symbols))

    def clear(self):
        self.starts.clear()
        self.symbols.clear()

    def __len__(self):
        return len(self.symbols)

    def dump_html(self) -> str:
        """Render the table as HTML, intended only for debugging."""
        out = ["<table>", "<tr><th>Name</th><th>Address</th><th>Length</th></tr>"]
        for sym in self.symbols:
            span = sym.address_span
            out.append(
                f"<tr><td>{escape(sym.name)}</td>"
                f"<td>{span.address:x}</td>"
                f"<td>{span.length}</td></tr>"
            )
        out.append("</table>")
        return "\n".join(out)
