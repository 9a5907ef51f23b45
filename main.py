# main.py
from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Iterator
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from debug import Debug
from errors import EnigmaError
from machine import Machine
from utilities import (
    BUILTIN_CATALOGS,
    Catalog,
    builtin_catalog,
    configure,
    group,
    load_catalog,
    preprocess_message,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()


@dataclass(slots=True)
class Config:
    """Runtime switches for the text around the machine."""

    block: int = 5                  # display group size
    pass_unknown: bool = False      # copy symbols outside the alphabet through


# ────────────────────────────────────────────────────────────────────────
#  1. Catalog loading
# ────────────────────────────────────────────────────────────────────────


def load_machine(args: argparse.Namespace, cfg: Config) -> Machine:
    catalog: Catalog
    if args.config:
        catalog = load_catalog(args.config)
    else:
        catalog = builtin_catalog(args.catalog)
    return catalog.build_machine(pass_unknown=cfg.pass_unknown)


# ────────────────────────────────────────────────────────────────────────
#  2. Message batches
# ────────────────────────────────────────────────────────────────────────


def process(lines: Iterable[str], machine: Machine, cfg: Config) -> Iterator[str]:
    """
    Convert a batch of lines. A line starting with '*' (re)configures the
    machine; every other line is converted and yielded in display groups.
    """
    configured = False
    for lineno, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        if line.lstrip().startswith("*"):
            configure(machine, line)
            configured = True
            continue
        if not line.strip():
            yield ""
            continue
        if not configured:
            raise EnigmaError(f"line {lineno}: message before the first settings line")
        text = preprocess_message(line, machine.alphabet)
        yield group(machine.convert(text), cfg.block)


# ────────────────────────────────────────────────────────────────────────
#  3. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with a rotor machine")
    source = p.add_mutually_exclusive_group()
    source.add_argument("--config", metavar="FILE", help="Load the rotor catalog from a JSON file.")
    source.add_argument("--catalog", choices=sorted(BUILTIN_CATALOGS), default="naval", help="Built-in rotor catalog. Default: naval")
    p.add_argument("-s", "--settings", metavar="LINE", help="Settings line, e.g. '* B BETA III IV I AXLE (HQ) (EX)'.")
    p.add_argument("-m", "--message", metavar="TEXT", help="Convert TEXT with --settings and print the result.")
    p.add_argument("--pass-unknown", dest="pass_unknown", action="store_true", help="Copy characters outside the alphabet instead of failing.")
    p.add_argument("--block", type=int, default=5, help="Output group size. Default: 5")
    p.add_argument("--debug", nargs="+", metavar="COMPONENT", choices=Debug.names(), help=f"Log machine internals: {', '.join(Debug.names())}")
    p.add_argument("--log-file", metavar="FILE", help="Also write debug output to FILE.")
    p.add_argument("input", nargs="?", type=Path, help="Message batch to read (default: stdin).")
    p.add_argument("output", nargs="?", type=Path, help="Where to write results (default: stdout).")
    return p.parse_args(argv)


def _run(args: argparse.Namespace) -> None:
    cfg = Config(block=args.block, pass_unknown=args.pass_unknown)
    machine = load_machine(args, cfg)

    # one‑shot mode ------------------------------------------------------
    if args.message is not None:
        if not args.settings:
            raise EnigmaError("--message needs --settings")
        configure(machine, args.settings)
        text = preprocess_message(args.message, machine.alphabet)
        print(group(machine.convert(text), cfg.block))
        return

    # batch mode ---------------------------------------------------------
    with ExitStack() as stack:
        src = stack.enter_context(args.input.open(encoding="utf-8")) if args.input else sys.stdin
        dst = stack.enter_context(args.output.open("w", encoding="utf-8")) if args.output else sys.stdout
        lines: Iterable[str] = src
        if args.settings:
            lines = [args.settings, *src]
        for out in process(lines, machine, cfg):
            print(out, file=dst)


# ────────────────────────────────────────────────────────────────────────
#  4. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    if args.debug:
        Debug.configure(log_to=args.log_file)
        debug.enable(*args.debug)

    try:
        _run(args)
    except (EnigmaError, OSError) as e:
        sys.exit(f"Error: {e}")


if __name__ == "__main__":
    main()
