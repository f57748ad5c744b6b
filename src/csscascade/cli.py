"""Command-line interface for csscascade."""

from __future__ import annotations

import argparse
import json
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from csscascade.cascade import Origin, PropertyTest, sort_cascade
from csscascade.errors import InvalidInput, InvalidState

CONFIG_NAME = "csscascade.toml"

FORMATS = ("text", "json")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    selectors: list[str]
    input_files: list[Path]
    origin: Origin
    important: bool
    sort: bool
    format: str
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="csscascade",
        description="Report specificity and cascade order of CSS selectors",
    )
    p.add_argument("selectors", nargs="*", metavar="SELECTOR", help="Selector list to analyse")
    p.add_argument(
        "-f",
        "--file",
        action="append",
        default=[],
        metavar="FILE",
        help="Read selector lists from FILE, one per line (repeatable)",
    )
    p.add_argument(
        "--origin",
        choices=[o.value for o in Origin if o is not Origin.INLINE],
        default=None,
        help="Stylesheet origin of the selectors (default: author)",
    )
    p.add_argument(
        "--important",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Treat declarations as !important",
    )
    p.add_argument(
        "--sort",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Order output by cascade precedence, winner first",
    )
    p.add_argument("--format", choices=FORMATS, default=None, help="Output format (default: text)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--debug", action="store_true", help="Dump token trees to stderr")
    return p


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace, search_dir: Path | None = None) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags. Raises InvalidState on bad config values.
    """
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir if search_dir is not None else Path("."))

    origin_name = args.origin if args.origin is not None else config.get("origin", "author")
    try:
        origin = Origin(origin_name)
    except ValueError:
        raise InvalidState(f"invalid origin in config: {origin_name!r}") from None
    if origin is Origin.INLINE:
        raise InvalidState("inline declarations have no selector")

    fmt = args.format if args.format is not None else config.get("format", "text")
    if fmt not in FORMATS:
        raise InvalidState(f"invalid output format in config: {fmt!r}")

    important = args.important if args.important is not None else config.get("important", False)
    sort = args.sort if args.sort is not None else config.get("sort", False)
    if not isinstance(important, bool) or not isinstance(sort, bool):
        raise InvalidState("config options 'important' and 'sort' must be booleans")

    return CliOptions(
        selectors=list(args.selectors),
        input_files=[Path(p) for p in args.file],
        origin=origin,
        important=important,
        sort=sort,
        format=fmt,
        debug=args.debug,
    )


def read_sources(options: CliOptions) -> list[str]:
    """Collect selector lists from arguments, then from non-blank file lines."""
    sources = list(options.selectors)
    for path in options.input_files:
        for line in path.read_text(encoding="utf-8").splitlines():
            if line.strip():
                sources.append(line.strip())
    return sources


def analyse(options: CliOptions) -> list[PropertyTest]:
    """Parse every selector and wrap it with the configured origin and importance."""
    from csscascade.debug import dump_tokens
    from csscascade.parser import parse

    tests: list[PropertyTest] = []
    for source in read_sources(options):
        selectors = parse(source)
        if options.debug:
            dump_tokens(selectors, file=sys.stderr)
        tests.extend(
            PropertyTest(origin=options.origin, important=options.important, selector=s)
            for s in selectors
        )

    if options.sort:
        tests = sort_cascade(tests)
    return tests


def format_report(tests: list[PropertyTest], fmt: str) -> str:
    if fmt == "json":
        rows = [
            {
                "selector": t.selector.to_string() if t.selector is not None else None,
                "specificity": list(t.specificity()),
                "precedence": int(t.precedence_level()),
            }
            for t in tests
        ]
        return json.dumps(rows, indent=2) + "\n"

    lines = [f"{t.specificity()}\t{t.selector}" for t in tests]
    return "".join(line + "\n" for line in lines)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (InvalidState, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        tests = analyse(options)
    except InvalidInput as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    sys.stdout.write(format_report(tests, options.format))
    return 0
