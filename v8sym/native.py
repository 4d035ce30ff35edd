"""ELF symbol resolution for ticks landing in native code."""

from bisect import bisect_right
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from elftools.common.exceptions import ELFError
from elftools.elf.constants import SHN_INDICES
from elftools.elf.elffile import ELFFile
from v8sym.common import report

@dataclass(frozen=True)
class FuncSym:
    """Resolved function symbol with a virtual address range."""
    start: int
    end: int
    name: str

def _image_base_vaddr(elf: ELFFile) -> int:
    """Return the lowest PT_LOAD p_vaddr, used as the image base."""
    bases = []
    for seg in elf.iter_segments():
        if seg.header.p_type == "PT_LOAD":
            bases.append(int(seg.header.p_vaddr))
    return min(bases) if bases else 0


class ElfSymbols:
    """Function symbols of one ELF image, addressed by load offset.

    A shared-library record gives the runtime start of the mapping, so a pc
    inside it becomes `offset = pc - start`, and
          vaddr = offset + image_base
    where image_base = min PT_LOAD p_vaddr (0 for PIE and shared objects).
    """

    def __init__(self, path: str):
        self.path = path
        with open(path, "rb") as f:
            elf = ELFFile(f)
            self._img_base = _image_base_vaddr(elf)
            self._funcs = self._build_func_index(elf)
        self._starts = [fn.start for fn in self._funcs]

    @staticmethod
    def _iter_symbol_sections(elf: ELFFile):
        symtab = elf.get_section_by_name(".symtab")
        if symtab is not None:
            yield symtab
        dynsym = elf.get_section_by_name(".dynsym")
        if dynsym is not None:
            yield dynsym

    def _build_func_index(self, elf: ELFFile) -> list[FuncSym]:
        """Build a sorted list of function symbol ranges."""
        items = {}

        for sec in self._iter_symbol_sections(elf):
            for sym in sec.iter_symbols():
                if sym["st_shndx"] in (SHN_INDICES.SHN_UNDEF, "SHN_UNDEF"):
                    continue
                if sym["st_info"]["type"] != "STT_FUNC" or not sym.name:
                    continue

                start = int(sym["st_value"])
                if start == 0:
                    continue
                # .symtab comes first and wins over .dynsym duplicates
                items.setdefault(start, (int(sym["st_size"]), sym.name))

        funcs = []
        starts = sorted(items)
        for i, start in enumerate(starts):
            size, name = items[start]
            if size > 0:
                end = start + size
            elif i + 1 < len(starts):
                end = starts[i + 1]
            else:
                end = start + 1
            funcs.append(FuncSym(start, end, name))

        return funcs

    def resolve(self, offset: int) -> Optional[FuncSym]:
        """Resolve the function covering a load offset."""
        vaddr = offset + self._img_base
        i = bisect_right(self._starts, vaddr) - 1
        if i < 0:
            return None
        fn = self._funcs[i]
        if fn.start <= vaddr < fn.end:
            return fn
        return None

    def __len__(self):
        return len(self._funcs)


class NativeSymbols:
    """Lazily loaded ElfSymbols keyed by library path.

    Libraries that cannot be read are remembered and never retried.
    """
    def __init__(self):
        self._libs: dict[str, Optional[ElfSymbols]] = {}

    def get(self, path: str) -> Optional[ElfSymbols]:
        if path in self._libs:
            return self._libs[path]

        lib = None
        if Path(path).is_file():
            try:
                lib = ElfSymbols(path)
            except (ELFError, OSError) as e:
                report(f"[-] cannot load symbols from {path}: {e}")
        self._libs[path] = lib
        return lib

    def resolve(self, path: str, offset: int) -> Optional[str]:
        """Return the function name at `offset` inside `path`, if known."""
        lib = self.get(path)
        if lib is None:
            return None
        fn = lib.resolve(offset)
        return fn.name if fn else None
