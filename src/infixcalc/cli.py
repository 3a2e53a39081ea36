"""Command-line interface for infixcalc."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from infixcalc.errors import InvalidExpression

logger = logging.getLogger(__name__)

CONFIG_NAME = "infixcalc.toml"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_QUIT_WORDS = frozenset({"quit", "exit"})


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    expressions: list[str]
    input_file: Path | None
    precision: int | None
    debug: bool
    log_level: int


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="infixcalc",
        description="Evaluate infix arithmetic expressions",
    )
    p.add_argument(
        "expression",
        nargs="*",
        help="Expression to evaluate (default: read from --file or stdin)",
    )
    p.add_argument(
        "-f",
        "--file",
        metavar="FILE",
        help="Read expressions from FILE, one per line (not with EXPRESSION)",
    )
    p.add_argument(
        "--precision",
        type=int,
        default=None,
        metavar="N",
        help="Round results to N decimal places",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--debug", action="store_true", help="Dump tokens and stage trace to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def parse_log_level(name: str) -> int:
    """Map a level name such as ``"info"`` to its logging constant."""
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise argparse.ArgumentTypeError(f"unknown log level: {name}")
    return level


def _config_value(table: dict[str, Any], key: str, kind: type, section: str) -> Any:
    """Return table[key], which must be of *kind* (bools are not ints here)."""
    value = table[key]
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise argparse.ArgumentTypeError(f"invalid [{section}] {key} in config: {value!r}")
    return value


def resolve_options(args: argparse.Namespace, cwd: Path | None = None) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    search_dir = cwd if cwd is not None else Path(".")
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir)

    # Precision: config < CLI
    precision: int | None = None
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict) and "precision" in cfg_output:
        precision = _config_value(cfg_output, "precision", int, "output")
    if args.precision is not None:
        precision = args.precision
    if precision is not None and precision < 0:
        raise argparse.ArgumentTypeError(f"precision must not be negative: {precision}")

    # Debug dump: config < CLI
    debug = False
    cfg_debug = config.get("debug")
    if isinstance(cfg_debug, dict) and "enabled" in cfg_debug:
        debug = _config_value(cfg_debug, "enabled", bool, "debug")
    debug = debug or args.debug

    # Log level: config < CLI
    log_level = logging.WARNING
    cfg_logging = config.get("logging")
    if isinstance(cfg_logging, dict) and "level" in cfg_logging:
        log_level = parse_log_level(_config_value(cfg_logging, "level", str, "logging"))
    if args.verbose:
        log_level = logging.DEBUG

    if args.expression and args.file:
        raise argparse.ArgumentTypeError("give expressions or --file, not both")
    input_file = Path(args.file) if args.file else None

    return CliOptions(
        expressions=list(args.expression),
        input_file=input_file,
        precision=precision,
        debug=debug,
        log_level=log_level,
    )


def configure_logging(level: int) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def format_result(value: float, precision: int | None = None) -> str:
    """Render a result for printing, rounded when a precision is set."""
    from infixcalc.tokens import format_number

    if precision is not None:
        value = round(value, precision)
    return format_number(value)


def evaluate_line(expression: str, options: CliOptions, *, err: TextIO | None = None) -> float:
    """Run the pipeline on one expression, dumping stages when debugging."""
    from infixcalc.debug import StreamTracer, dump_tokens
    from infixcalc.eval import evaluate
    from infixcalc.lexer import tokenize
    from infixcalc.postfix import to_postfix

    if err is None:
        err = sys.stderr
    trace = StreamTracer(err) if options.debug else None
    tokens = tokenize(expression)
    postfix = to_postfix(tokens, expression, trace)
    if options.debug:
        dump_tokens(tokens, postfix, file=err)
    return evaluate(postfix, expression, trace)


def iter_expressions(lines: Iterable[str]) -> Iterator[str]:
    """Yield expression lines, skipping blanks and ``#`` comments."""
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        yield line


def run_expressions(
    expressions: Iterable[str],
    options: CliOptions,
    *,
    filename: str = "<arg>",
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Evaluate each expression, printing results to *out* and errors to *err*."""
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    status = 0
    for expression in expressions:
        try:
            value = evaluate_line(expression, options, err=err)
        except InvalidExpression as exc:
            logger.debug("rejected %r: %s", expression, exc.message)
            print(exc.format(filename), file=err)
            status = 1
            continue
        print(format_result(value, options.precision), file=out)
    return status


def repl_lines(stdin: TextIO, out: TextIO) -> Iterator[str]:
    """Yield lines from *stdin* until EOF or a quit word, prompting on a tty."""
    interactive = stdin.isatty()
    while True:
        if interactive:
            out.write("> ")
            out.flush()
        line = stdin.readline()
        if not line or line.strip() in _QUIT_WORDS:
            return
        yield line


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 2

    configure_logging(options.log_level)

    if options.expressions:
        return run_expressions(options.expressions, options)

    if options.input_file is not None:
        try:
            text = options.input_file.read_text(encoding="utf-8")
        except OSError as exc:
            print(f"error: cannot read {options.input_file}: {exc.strerror}", file=sys.stderr)
            return 2
        return run_expressions(
            iter_expressions(text.splitlines()), options, filename=str(options.input_file)
        )

    return run_expressions(
        iter_expressions(repl_lines(sys.stdin, sys.stdout)), options, filename="<stdin>"
    )
