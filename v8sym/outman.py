"""Tick formatting and flat profile output."""

from collections import Counter
from pathlib import Path
from typing import Optional
from v8sym.common import Frame, ResolvedTick

UNKNOWN = "(unknown)"

class OutputManager:
    """Write resolved ticks and per-function sample counts.

    Ticks go to `<out>/ticks.txt`, one line per sample with frames joined
    innermost first. The flat profile is written to `<out>/summary.txt` on
    close().
    """
    def __init__(self, out: str, wl: Optional[dict[str, list[str]]] = None):
        self.wl = wl
        self.counts = Counter()
        self.total = 0
        self.filtered = 0
        self.ticks_file = None

        out_path = Path(out)
        out_path.mkdir(exist_ok=True, parents=True)

        self.out = out

    def _is_whitelisted(self, frame: Frame):
        """Check whether a frame's function is in the whitelist."""
        if not self.wl:
            return True

        if frame.resource_url not in self.wl:
            return False

        return frame.name in self.wl[frame.resource_url]

    @staticmethod
    def prettify_frame(frame: Frame) -> str:
        """Render a frame as `name (url:line) [type]` or its bare address."""
        if not frame.resolved:
            return f"{hex(frame.address)} {UNKNOWN}"

        res = frame.name
        if frame.resource_url:
            if frame.resource_line_number:
                res += f" ({frame.resource_url}:{frame.resource_line_number})"
            else:
                res += f" ({frame.resource_url})"
        if frame.symbol_type:
            res += f" [{frame.symbol_type}]"
        return res

    def _count_key(self, frame: Frame) -> str:
        if not frame.resolved:
            return UNKNOWN
        return self.prettify_frame(frame)

    def write(self, tick: ResolvedTick):
        """Write a resolved tick unless its top frame is filtered out."""
        if not self._is_whitelisted(tick.top):
            self.filtered += 1
            return

        if self.ticks_file is None:
            self.ticks_file = open(f"{self.out}/ticks.txt", 'w', buffering=1, encoding="utf-8", errors="replace")

        stack = " <- ".join(self.prettify_frame(f) for f in tick.frames)
        self.ticks_file.write(f"[{tick.vm_state}] {stack}\n")

        self.counts[self._count_key(tick.top)] += 1
        self.total += 1

    def summary(self) -> list[str]:
        """Flat profile lines, most sampled function first."""
        lines = []
        for name, count in self.counts.most_common():
            pct = 100.0 * count / self.total
            lines.append(f"{count:>8} {pct:6.2f}%  {name}")
        return lines

    def close(self):
        """Flush the summary and close the ticks file."""
        with open(f"{self.out}/summary.txt", 'w', encoding="utf-8", errors="replace") as f:
            f.write(f"total ticks: {self.total} (filtered: {self.filtered})\n")
            for line in self.summary():
                f.write(line + "\n")

        if self.ticks_file is not None:
            self.ticks_file.close()
            self.ticks_file = None
