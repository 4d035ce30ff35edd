"""CLI entrypoint for the v8sym tick symbolicator.

This script parses arguments, replays a V8 log through a LogProcessor and
writes the resolved ticks, the flat profile and an optional symbol table
dump.
"""

import argparse
import json
from pathlib import Path
from yaspin import yaspin
from v8sym.common import reporting_to
from v8sym.outman import OutputManager
from v8sym.processor import LogProcessor

def parse_args(argv=None) -> argparse.Namespace:
    """Define and parse CLI arguments.

    Returns:
        Parsed CLI arguments.
    """
    p = argparse.ArgumentParser(
        description="Resolve V8 profiler ticks to JavaScript functions"
    )
    p.add_argument("log", help="V8 log file (e.g. written by --prof)")
    p.add_argument(
        "out",
        help="Output dir for ticks.txt and summary.txt",
    )
    p.add_argument(
        "--wl",
        help="Whitelist of functions to report, JSON object of {url: [names]}"
    )
    p.add_argument(
        "--dump",
        help="Write an HTML dump of the final code symbol table to this file"
    )
    p.add_argument(
        "--no-native",
        action="store_true",
        help="Do not read ELF symbols of shared libraries",
    )
    p.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of summary lines printed. Default: %(default)s",
    )

    return p.parse_args(argv)


def main(argv=None):
    """Replay the log, write outputs and print the top of the profile."""
    args = parse_args(argv)

    log_path = Path(args.log)
    if not log_path.exists():
        print(f"[!] Log file does not exist: {log_path}")
        return 1

    if args.wl:
        wl_path = Path(args.wl)
        if not wl_path.exists():
            print(f"[!] Whitelist file does not exist: {wl_path}")
            return 1

        with wl_path.open() as f:
            wl = json.load(f)
    else:
        wl = None

    outman = OutputManager(args.out, wl)
    processor = LogProcessor(outman, native=not args.no_native)

    try:
        with yaspin(text=f"[~] processing {log_path.name}", color="cyan") as sp, reporting_to(sp.write):
            processor.process_file(str(log_path))
    finally:
        outman.close()

    stats = processor.stats
    print(f"[+] {stats['lines']} lines, {stats['code-creation']} code objects, {stats['tick']} ticks")
    print(f"[+] {stats['unresolved ticks']} unresolved ticks, {outman.filtered} filtered")
    for line in outman.summary()[:args.top]:
        print(line)

    if args.dump:
        with open(args.dump, 'w', encoding="utf-8") as f:
            f.write(processor.code.dump_html())
        print(f"[+] symbol table dumped to {args.dump}")

    return 0

if __name__ == "__main__":
    raise SystemExit(main())
