from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path

from calcline import __version__
from calcline.config import CalcConfig, load_config
from calcline.diagnostics import format_caret, format_error_with_hint
from calcline.errors import CalcConfigError, CalcError, CalcSyntaxError
from calcline.evaluator import evaluate
from calcline.repl import BANNER, Repl, format_value, make_console

EXIT_OK = 0
EXIT_EVAL_ERROR = 1
EXIT_CONFIG = 2

logger = logging.getLogger("calcline.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calcline",
        description=BANNER,
        epilog="Options go before expressions. Arguments such as -5+5 are read as expressions.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "expressions",
        nargs="*",
        metavar="EXPR",
        help="Evaluate EXPR and exit (repeatable). Starts the REPL when omitted.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to calcline.toml (defaults to searching upward from cwd).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information to stderr.",
    )
    return parser


_NEGATIVE_EXPR = re.compile(r"^-+[\d.(]")


def parse_args(argv: list[str]) -> argparse.Namespace:
    if "--" not in argv:
        # argparse would take -5+5 for an option; end option parsing at the
        # first argument that reads as an expression.
        for i, arg in enumerate(argv):
            if _NEGATIVE_EXPR.match(arg):
                argv = [*argv[:i], "--", *argv[i:]]
                break
    return _build_parser().parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _print_error(e: BaseException) -> None:
    _eprint(format_error_with_hint(e))


def _load_config(args: argparse.Namespace) -> CalcConfig:
    config_path = Path(args.config).resolve() if args.config else None
    return load_config(config_path=config_path)


def cmd_eval(args: argparse.Namespace, cfg: CalcConfig) -> int:
    """Evaluate each expression argument once."""

    rc = EXIT_OK
    for text in args.expressions:
        try:
            value = evaluate(text)
        except CalcSyntaxError as e:
            _eprint(format_caret(text, e, cfg.display.error_indent))
            _print_error(e)
            rc = EXIT_EVAL_ERROR
            continue
        except CalcError as e:
            # Incomplete input cannot be continued outside the REPL.
            _print_error(e)
            rc = EXIT_EVAL_ERROR
            continue
        print(format_value(value))
    return rc


def cmd_repl(args: argparse.Namespace, cfg: CalcConfig) -> int:
    console = make_console(cfg.display, no_color=bool(args.no_color))
    console.print(BANNER)
    Repl(cfg, console).run()
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_CONFIG

    _configure_logging(bool(args.verbose))

    try:
        cfg = _load_config(args)
    except CalcConfigError as e:
        _print_error(e)
        return EXIT_CONFIG
    logger.debug("Using config: %s", cfg)

    if args.expressions:
        return cmd_eval(args, cfg)
    return cmd_repl(args, cfg)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
