"""Symbols created by code-creation records."""

from dataclasses import dataclass
from v8sym.aliases import AliasEntry
from v8sym.common import AddressSpan

@dataclass(frozen=True)
class V8Symbol:
    """A named block of generated code and the span it currently occupies.

    Attributes:
        name: Function or stub name, first token of the log name field.
        resource_url: Script the function comes from, empty if unknown.
        resource_line_number: Line inside the script, 0 if unknown.
        symbol_type: Code kind (LazyCompile, Builtin, Stub, ...).
        address_span: Address range owned by this symbol.
    """
    name: str
    resource_url: str
    resource_line_number: int
    symbol_type: AliasEntry
    address_span: AddressSpan

    def moved(self, address: int) -> "V8Symbol":
        """Copy of this symbol relocated to `address`."""
        span = AddressSpan(address, self.address_span.length)
        return V8Symbol(self.name, self.resource_url, self.resource_line_number, self.symbol_type, span)

    def __str__(self):
        return f"{self.name} : {self.address_span}"


def parse_resource(token: str) -> tuple[str, int]:
    """Split a `path[:line]` token into (url, line).

    Anything that is not a clean non-negative line suffix leaves the whole
    token as the url with line 0.
    """
    colon = token.rfind(":")
    if colon <= 0:
        return token, 0

    suffix = token[colon + 1:]
    if not suffix.isascii() or not suffix.isdigit():
        return token, 0

    return token[:colon], int(suffix)


def build_symbol(raw_name: str, symbol_type: AliasEntry, address: int, length: int) -> V8Symbol:
    """Create a V8Symbol from the name field of a code-creation record.

    Examples of `raw_name`:
        "compute app.js:10"  -> name "compute", url "app.js", line 10
        "compute app.js"     -> name "compute", url "app.js", line 0
        "ArrayPush"          -> name "ArrayPush", url "", line 0
    """
    vals = raw_name.split()
    if len(vals) <= 1:
        name, url, line = raw_name, "", 0
    else:
        name = vals[0]
        url, line = parse_resource(vals[1])

    return V8Symbol(name, url, line, symbol_type, AddressSpan(address, length))
