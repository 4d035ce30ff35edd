"""Decompression of delta-encoded address fields in the V8 log."""


class AddressTag:
    """Running address context of a single log stream.

    Compressed logs write an address as a signed offset from the previous
    address written on the same stream, so each stream keeps its own
    previous value.
    """
    def __init__(self, name: str):
        self.name = name
        self.prev_address = 0

    def decode(self, delta: int) -> int:
        """Apply a delta to the previous address and remember the result."""
        self.prev_address += delta
        return self.prev_address

    def set(self, address: int) -> int:
        """Record an absolute address so later deltas are relative to it."""
        self.prev_address = address
        return address

    def reset(self):
        self.prev_address = 0

    def __repr__(self):
        return f"AddressTag({self.name!r}, {hex(self.prev_address)})"


class AddressDecoder:
    """Per-session set of address streams, created on first use."""
    def __init__(self):
        self._tags: dict[str, AddressTag] = {}

    def tag(self, stream: str) -> AddressTag:
        if stream not in self._tags:
            self._tags[stream] = AddressTag(stream)
        return self._tags[stream]

    def decode(self, stream: str, delta: int) -> int:
        """Resolve `delta` against the previous address of `stream`."""
        return self.tag(stream).decode(delta)

    def set(self, stream: str, address: int) -> int:
        return self.tag(stream).set(address)

    @property
    def streams(self) -> list[str]:
        return list(self._tags)

    def reset(self):
        """Forget every stream, e.g. when a new log starts."""
        self._tags.clear()
