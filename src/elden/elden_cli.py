"""
ELDEN CLI Entrypoint.

This module provides the command-line interface for the ELDEN front end. It reads
one source file (or an inline string), tokenizes and parses it, and reports the
result.

Features:
    - Read source from a file path or an inline string (`-s`).
    - Print the token stream (`--tokens`).
    - Dump the AST as indented JSON (`--dump`).
    - Run the semantic checks (`--check`).
    - Debug logging of every parser stage (`--verbose`).

Exit status:
    0 on success, 1 on a lexical, syntax or semantic error, 2 if the source file
    cannot be read or is not valid UTF-8.

Example usage:
    elden program.eld
    elden program.eld --dump
    elden -s "func main() { return 1; }" --check

Functions:
    run_elden(source, is_string=False, show_tokens=False, dump=False, check=False) -> Program:
        Runs the pipeline (read → tokenize → parse → optional checks) and prints output.

    main(argv=None) -> None:
        Parses CLI arguments, configures logging and maps errors to exit codes.
"""

import argparse
import json
import logging
import sys

from elden.elden_ast import Program
from elden.elden_errors import LexError, ParseError, SemanticError
from elden.elden_lexer import tokenize_with_main
from elden.elden_program import parse_program
from elden.elden_semantic import SemanticAnalyzer

logger = logging.getLogger(__name__)


def run_elden(
    source: str,
    is_string: bool = False,
    show_tokens: bool = False,
    dump: bool = False,
    check: bool = False,
) -> Program:
    """
    Run the ELDEN front end on a file or an inline string and print the result.

    Args:
        source (str): Path to a source file, or the code itself when `is_string` is True.
        is_string (bool): Treat `source` as code instead of a path. Defaults to False.
        show_tokens (bool): Print one token per line before parsing. Defaults to False.
        dump (bool): Print the AST as indented JSON instead of a summary. Defaults to False.
        check (bool): Run the semantic analyzer after parsing. Defaults to False.

    Returns:
        Program: The parsed program.

    Raises:
        OSError: If the source file cannot be read.
        UnicodeDecodeError: If the source file is not valid UTF-8.
        LexError, ParseError, SemanticError: On the first error in the source.
    """
    # 1. Read source
    if not is_string:
        logger.debug("reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    tokens, main_index = tokenize_with_main(source)
    if show_tokens:
        for tok in tokens:
            print(f"{tok.line}:{tok.col}\t{tok.type}\t{tok.value}")

    # 3. Parsing
    program = parse_program(tokens)

    # 4. Semantic checks
    if check:
        SemanticAnalyzer().analyze(program)

    # 5. Output result
    if dump:
        print(json.dumps(program.to_dict(), indent=2))
    else:
        names = ", ".join(f.name.value for f in program.functions)
        print(f"parsed {len(program.functions)} function(s): {names}")
        if main_index is None:
            print("(no main function)")
        if check:
            print("semantic check passed")

    return program


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the ELDEN CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print the token stream.
        - `--dump`: Print the AST as JSON.
        - `--check`: Run semantic analysis.
        - `--verbose`: Enable debug logging.
    """
    parser = argparse.ArgumentParser(
        prog="elden", description="Tokenize and parse ELDEN source."
    )
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", dest="show_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument("--dump", action="store_true", help="Print the AST as JSON")
    parser.add_argument(
        "--check", action="store_true", help="Run semantic analysis after parsing"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run_elden(
            source=args.source,
            is_string=args.string,
            show_tokens=args.show_tokens,
            dump=args.dump,
            check=args.check,
        )
    except OSError as e:
        print(f"error: cannot read {args.source}: {e.strerror or e}", file=sys.stderr)
        sys.exit(2)
    except UnicodeDecodeError as e:
        print(f"error: cannot read {args.source}: {e.reason}", file=sys.stderr)
        sys.exit(2)
    except (LexError, ParseError, SemanticError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
