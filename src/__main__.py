#!/usr/bin/env python3
"""
prep - line-oriented text preprocessor

Expands $PREP directives embedded in arbitrary text files and prints the
result to standard output.

File conventions:
    - A first line of exactly "$PREP enable" switches directive processing on;
      any other file is printed unchanged
    - $$ lines are comments
    - $PREP include <path>            insert another processed file
    - $PREP define <name> <value...>  set a variable
    - $PREP concat <name> <args...>   set a variable to a delimited string
    - $PREP stringify <name> <path>   set a variable to a file as a string
    - $PREP disable                   ignore the rest of the file
    - %NAME% is replaced by the variable's value; \\$ and \\% escape

Usage:
    prep main.c.prep > main.c

Examples:
    # Process a file
    prep config.prep

    # Trace includes and definitions on stderr
    prep config.prep -vvv

    # Show the source with directive highlighting
    prep config.prep --highlight
"""

import sys
from pathlib import Path
from argparse import (
    ArgumentParser,
    Namespace,
    ArgumentDefaultsHelpFormatter,
    RawDescriptionHelpFormatter,
)
from typing import List, Optional

from pygments import highlight
from pygments.formatters import TerminalFormatter

from .lib import Preprocessor, PrepError, DirectiveRegistry, __version__, LOG, state_connectToLogger
from .lib.lexer import get_lexer
from .models import ProgramState, pipeline, DirectiveCategory


class HelpFormatter(ArgumentDefaultsHelpFormatter, RawDescriptionHelpFormatter):
    """Show defaults and keep the directive table laid out as written"""


def directives_describe(registry: DirectiveRegistry) -> str:
    """
    Build the help epilog listing every directive by category.

    Args:
        registry: Registry whose specs are documented

    Returns:
        Multi-line text with one description and one example per directive
    """
    lines = []
    for category in DirectiveCategory:
        specs = registry.directives_listByCategory(category)
        if not specs:
            continue
        lines.append(f"{category.value} directives:")
        for spec in specs:
            lines.append(f"  {spec.name:<10} {spec.description}")
            for example in spec.examples:
                lines.append(f"  {'':<10}   e.g. {example}")
        lines.append("")
    return "\n".join(lines).rstrip()


# Define CLI arguments
parser = ArgumentParser(
    prog="prep",
    description="prep - line-oriented text preprocessor",
    epilog=directives_describe(DirectiveRegistry()),
    formatter_class=HelpFormatter,
)

parser.add_argument("inputFile", type=str, help="Source file to process")

parser.add_argument(
    "--highlight",
    action="store_true",
    help="Print the source with syntax highlighting instead of processing it",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=0,
    help="Increase diagnostic output on stderr (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate that the input file exists.

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the source file
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = Path(state.inputFile)
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    state.envOK = True
    LOG(f"Input file: {input_file}", level=2)
    return state


def source_process(inputstate: ProgramState) -> ProgramState:
    """
    Run the preprocessor over the input file with a fresh context.

    Returns:
        ProgramState with added field:
            - processedOutput: rendered output text

    Exits:
        1 on any preprocessing error
    """
    state = inputstate.copy()

    LOG(f"Processing {state.inputSourceFile}...", level=1)

    try:
        output = Preprocessor().process_file(state.inputSourceFile)
    except PrepError as e:
        print(f"Error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)
    except RecursionError:
        # No cycle detection: a self-including file recurses until this
        print(
            f"Error: include nesting too deep in {state.inputSourceFile} (circular include?)",
            file=sys.stderr,
        )
        sys.exit(1)

    state.processedOutput = output.render()
    LOG(f"Produced {len(state.processedOutput)} characters", level=2)
    return state


def source_highlight(inputstate: ProgramState) -> ProgramState:
    """
    Print the raw source with prep syntax highlighting.

    Exits:
        1 if the file cannot be read
    """
    state = inputstate.copy()

    try:
        source = Preprocessor().source_read(state.inputSourceFile)
    except PrepError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.stdout.write(highlight(source, get_lexer(), TerminalFormatter()))
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Print the processed output to stdout.

    Exits:
        1 if no output was produced
    """
    state: ProgramState = inputstate.copy()
    if state.processedOutput is None:
        print("Error: Processing failed", file=sys.stderr)
        sys.exit(1)

    print(state.processedOutput)
    return state


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point - process one prep source file.

    Orchestrates the pipeline:
        1. env_check: Validate the input path
        2. source_process: Run the preprocessor
        3. results_report: Print the output

    With --highlight, source_highlight replaces the last two stages.

    Args:
        argv: Argument list (defaults to sys.argv[1:])
    """
    options: Namespace = parser.parse_args(argv)
    state: ProgramState = ProgramState.state_createFromNamespace(options)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    if state.highlight:
        pipeline(state, env_check, source_highlight)
    else:
        pipeline(state, env_check, source_process, results_report)


if __name__ == "__main__":
    main()
