"""Main entry point for the COBOL Interpreter.

This module provides the CLI interface for running COBOL programs.
"""

import argparse
import copy
import sys
import logging
from pathlib import Path
from typing import Optional

import yaml

from cobol_interpreter import (
    InterpreterError,
    RunOptions,
    RunResult,
    run_file,
    run_sample,
)
from output import JSONWriter, TextWriter

__version__ = "0.1.0"

DEFAULT_CONFIG = {
    "source": {"encoding": "utf-8"},
    "output": {
        "format": "text",
        "pretty_print": True,
        "indent_size": 2,
        "include_source_info": False,
    },
    "logging": {"level": "INFO"},
}


def setup_logging(level: str = "INFO", quiet: bool = False) -> None:
    """Configure logging.

    Args:
        level: Logging level string (DEBUG, INFO, WARNING, ERROR)
        quiet: If True, suppress all output except errors
    """
    if quiet:
        level = "ERROR"
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path and config_path.exists():
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f)
            if user_config:
                # Merge user config with defaults
                for key, value in user_config.items():
                    if isinstance(value, dict) and key in config:
                        config[key].update(value)
                    else:
                        config[key] = value

    return config


def write_result(result: RunResult, args, config: dict) -> None:
    """Deliver a run's output as text or JSON, to a file or stdout."""
    output_config = config.get("output", {})
    as_json = args.json or output_config.get("format") == "json"

    if as_json:
        writer = JSONWriter(
            pretty_print=output_config.get("pretty_print", True),
            indent=output_config.get("indent_size", 2),
        )
        text = writer.write(result, args.output)
    else:
        text = TextWriter().write(result.output, args.output)

    if args.output:
        logging.getLogger(__name__).info(f"Output written to: {args.output}")
    elif text:
        print(text)


def handle_run(args) -> int:
    """Run the requested program.

    Args:
        args: Parsed arguments

    Returns:
        Exit code
    """
    logger = logging.getLogger(__name__)
    config = load_config(args.config)

    if args.output:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create output directory: {e}")
            return 1

    input_handle = None
    try:
        if args.input:
            input_handle = open(args.input, "r", encoding="utf-8")
        options = RunOptions(
            input_stream=input_handle or sys.stdin,
            encoding=config.get("source", {}).get("encoding", "utf-8"),
            include_source_info=(
                args.include_source_info
                or config.get("output", {}).get("include_source_info", False)
            ),
        )

        if args.source is None:
            logger.info("No source file given, running the built-in sample program")
            result = run_sample(options)
        else:
            result = run_file(args.source, options)

        write_result(result, args, config)
        return 0

    except InterpreterError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Run failed: {e}")
        return 1
    finally:
        if input_handle is not None:
            input_handle.close()


def create_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="cobol-run",
        description="COBOL Interpreter - Runs programs written in a small COBOL subset.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s program.cob
  %(prog)s program.cob --input answers.txt
  %(prog)s program.cob --json -o ./out/result.json
  %(prog)s                      # runs the built-in sample program
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "source",
        type=Path,
        nargs="?",
        help="Path to the COBOL source file to run (default: built-in sample)",
    )

    # Input/output options
    io_group = parser.add_argument_group("Input/Output Options")
    io_group.add_argument(
        "--input",
        type=Path,
        metavar="FILE",
        help="File supplying ACCEPT input, one value per line (default: stdin)",
    )
    io_group.add_argument(
        "-o", "--output",
        type=Path,
        metavar="FILE",
        help="Write program output to FILE instead of stdout",
    )
    io_group.add_argument(
        "--json",
        action="store_true",
        help="Emit a JSON document with program name, output lines and timing",
    )
    io_group.add_argument(
        "--include-source-info",
        action="store_true",
        help="Include source file metadata in JSON output (path, line count)",
    )

    # Configuration options
    config_group = parser.add_argument_group("Configuration")
    config_group.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="Path to YAML configuration file",
    )

    # Logging options
    logging_group = parser.add_argument_group("Logging")
    logging_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (debug level logging)",
    )
    logging_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    parser.set_defaults(func=handle_run)
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose and args.quiet:
        parser.error("--verbose and --quiet cannot be used together")

    config = load_config(args.config)
    log_level = "DEBUG" if args.verbose else config.get("logging", {}).get("level", "INFO")
    setup_logging(log_level, quiet=args.quiet)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
