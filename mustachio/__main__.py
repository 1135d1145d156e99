"""CLI entry point for Mustachio."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from . import (
    EMPTY,
    ExitCode,
    InputError,
    Mapping,
    MustachioError,
    RenderConfig,
    Scalar,
    Value,
    from_external_tree,
    render,
)

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".mustache"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mustachio",
        description="Mustachio - Render logic-less Mustache templates",
    )
    parser.add_argument("template", help="Path to template file, or - for stdin")
    parser.add_argument("--data", "-d", help="JSON data")
    parser.add_argument("--data-file", "-f", help="Path to JSON data file")
    parser.add_argument("--partials-file", "-p", help="Path to JSON object of partials")
    parser.add_argument(
        "--partials-dir", help=f"Directory of {PARTIAL_SUFFIX} files used as partials"
    )
    parser.add_argument("--output", "-o", help="Write output to file instead of stdout")
    parser.add_argument(
        "--max-partial-depth",
        type=int,
        default=_env_int("MUSTACHIO_MAX_PARTIAL_DEPTH"),
        help="Fail when partials nest deeper than this (default: unbounded)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return cmd_render(args)
    except MustachioError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except RecursionError:
        print("Error: partials nest too deeply (self-referencing partial?)", file=sys.stderr)
        return ExitCode.RUNTIME_ERROR
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return ExitCode.RUNTIME_ERROR


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return None


def _read_text(path: str | Path) -> str:
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Cannot read {path}: {e}") from e


def _load_json(text: str, source: str) -> Value:
    try:
        return from_external_tree(json.loads(text))
    except json.JSONDecodeError as e:
        raise InputError(f"Invalid JSON in {source}: {e}") from e


def load_partials_dir(directory: Path) -> dict[str, Value]:
    """Read every *.mustache file in a directory, keyed by file stem."""
    if not directory.is_dir():
        raise InputError(f"Partials directory not found: {directory}")

    partials: dict[str, Value] = {}
    for path in sorted(directory.glob(f"*{PARTIAL_SUFFIX}")):
        partials[path.stem] = Scalar(_read_text(path))
        logger.debug("Loaded partial %s from %s", path.stem, path)
    return partials


def cmd_render(args) -> int:
    """Render a template file."""
    template = _read_text(args.template)

    context: Value = EMPTY
    if args.data:
        context = _load_json(args.data, "--data")
    elif args.data_file:
        context = _load_json(_read_text(args.data_file), args.data_file)

    fields: dict[str, Value] = {}
    if args.partials_dir:
        fields.update(load_partials_dir(Path(args.partials_dir)))
    if args.partials_file:
        loaded = _load_json(_read_text(args.partials_file), args.partials_file)
        if isinstance(loaded, Mapping):
            fields.update(loaded.fields)
        else:
            logger.warning("Ignoring %s: partials must be a JSON object", args.partials_file)

    config = RenderConfig(max_partial_depth=args.max_partial_depth)
    output = render(template, context, Mapping(fields), config)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)
    return ExitCode.SUCCESS


if __name__ == "__main__":
    sys.exit(main())
