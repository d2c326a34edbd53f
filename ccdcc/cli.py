#!/usr/bin/env python3

import argparse
import argcomplete
import asyncio
import json
import os
import subprocess
import sys

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import wraps
from importlib.metadata import PackageNotFoundError, version
from typing import Callable, Dict, List, Optional
from .ai import ask, gen, interactive, lint
from .ai.assistants.gen import CONTEXTS, DEFAULT_SOURCE, SCOPES
from .ai.assistants.lint import DEFAULT_OUTPUT_DIR, OUTPUT_FORMATS
from .ai.prompts import ASK_MAX_TURNS, get_generate_format


_ai_config: Dict = {}

CONFIG_TEMPLATE = {
    "provider": "openai",
    "model": "gpt-4o-mini",
    "provider_configs": {"openai": {"api_key": ""}},
}


@dataclass
class Argument(ABC):
    def __init__(self, help: str, kwargs: Optional[dict] = None):
        self.help = help
        self.kwargs = kwargs if kwargs is not None else {}

    @abstractmethod
    def add_to_parser(self, parser: argparse.ArgumentParser):
        pass


class OptionalArg(Argument):
    def __init__(
        self,
        long_option: str,
        help: str,
        short_option: Optional[str] = None,
        kwargs: Optional[dict] = None,
    ):
        super().__init__(help=help, kwargs=kwargs)
        self.short_option = short_option
        self.long_option = long_option

    def add_to_parser(self, parser: argparse.ArgumentParser):
        flags = [self.short_option, self.long_option] if self.short_option else [self.long_option]
        parser.add_argument(*flags, help=self.help, **self.kwargs)


class PositionalArg(Argument):
    def __init__(self, name: str, help: str, kwargs: Optional[dict] = None):
        super().__init__(help=help, kwargs=kwargs)
        self.name = name

    def add_to_parser(self, parser: argparse.ArgumentParser):
        parser.add_argument(self.name, help=self.help, **self.kwargs)


@dataclass
class Command:
    name: str
    func: Callable
    help: str
    description: str
    args: list[Argument]


def _config_path() -> str:
    return os.environ.get("CCDCC_CONFIG") or os.path.join(
        os.path.expanduser("~"), ".ccdcc", "config.json"
    )


def _create_config(config_path: str):
    print(f"Configuration file not found at {config_path}.")
    confirm = input("Do you want to create one now? [y/N] ")
    if confirm.lower() != "y":
        print("Configuration is required to use ccdcc.", file=sys.stderr)
        sys.exit(1)

    os.makedirs(os.path.dirname(config_path), exist_ok=True)
    with open(config_path, "w") as config_file:
        json.dump(CONFIG_TEMPLATE, config_file, indent=4)

    editor = os.getenv("EDITOR", "vi")
    try:
        subprocess.run([editor, config_path], check=True)
    except FileNotFoundError:
        print(
            f"Could not find editor '{editor}'. Edit {config_path} manually and try again.",
            file=sys.stderr,
        )
        sys.exit(1)


def _validate_ai_config():
    global _ai_config
    if _ai_config:
        return

    config_path = _config_path()
    if not os.path.exists(config_path):
        _create_config(config_path)

    try:
        with open(config_path, "r") as config_file:
            _ai_config = json.load(config_file)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading or parsing {config_path}: {e}", file=sys.stderr)
        sys.exit(1)


def command(
    func: Callable, args: List[Argument], check: Optional[Callable] = None
) -> Command:
    """
    Describes a ccdcc sub-command backed by a `handle_<name>` function.
    `check`, if given, receives the parsed arguments and runs before the
    config is loaded.
    """
    if not func.__name__.startswith("handle_"):
        raise ValueError("Command handler must start with 'handle_'.")

    if not func.__doc__:
        raise ValueError(
            f"Command handler '{func.__name__}' must have a docstring for its help text."
        )

    @wraps(func)
    def wrapper(*args, **kwargs):
        if check:
            check(*args, **kwargs)
        _validate_ai_config()
        return func(*args, **kwargs)

    # Use the first line of the docstring as the help text and
    # the full docstring for the detailed description.
    help_text = func.__doc__.strip().split("\n")[0]
    return Command(func.__name__[len("handle_"):], wrapper, help_text, func.__doc__, args)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value} must be a positive integer")
    return number


##############################################################################


def handle_ask(args):
    """Ask the AI assistant a question.
    Without --prompt (or with --interactive) you will be asked to type one.
    """
    asyncio.run(ask(_ai_config, args.prompt, args.max_turns, args.interactive))


def handle_lint(args):
    """Lint documents for technical writing quality.
    Every .md, .txt and .rst file is scored for effectiveness, efficiency and
    satisfaction. With --fix an improved version is written to the output directory.
    """
    asyncio.run(
        lint(_ai_config, args.target, output=args.output, fix=args.fix, format=args.format)
    )


def handle_interactive(args):
    """Start an interactive session with the AI assistant.
    Type 'exit', 'quit' or 'q' to end the session.
    """
    asyncio.run(interactive(_ai_config))


def _check_gen_format(args):
    get_generate_format(args.format)


def handle_gen(args):
    """Generate documents (readme, claude, slides) from source content."""
    asyncio.run(
        gen(
            _ai_config,
            args.format,
            source=args.source,
            scope=args.scope,
            context=args.context,
            output=args.output,
        )
    )


_available_commands: List[Command] = [
    command(
        handle_ask,
        [
            OptionalArg(
                short_option="-p",
                long_option="--prompt",
                help="Prompt text to send to the assistant.",
            ),
            OptionalArg(
                short_option="-m",
                long_option="--max-turns",
                help=f"Maximum number of turns (default: {ASK_MAX_TURNS}).",
                kwargs={"type": _positive_int, "default": ASK_MAX_TURNS},
            ),
            OptionalArg(
                short_option="-i",
                long_option="--interactive",
                help="Ask for the prompt interactively.",
                kwargs={"action": "store_true"},
            ),
        ],
    ),
    command(
        handle_lint,
        [
            PositionalArg(
                name="target",
                help="File or directory to lint. Defaults to the current directory.",
                kwargs={"nargs": "?", "metavar": "file-or-directory"},
            ),
            OptionalArg(
                short_option="-o",
                long_option="--output",
                help=f"Output directory for linted files (default: {DEFAULT_OUTPUT_DIR}).",
                kwargs={"default": DEFAULT_OUTPUT_DIR},
            ),
            OptionalArg(
                long_option="--fix",
                help="Create improved versions of the documents.",
                kwargs={"action": "store_true"},
            ),
            OptionalArg(
                long_option="--format",
                help="Output format (default: summary).",
                kwargs={"choices": OUTPUT_FORMATS, "default": "summary"},
            ),
        ],
    ),
    command(handle_interactive, []),
    command(
        handle_gen,
        [
            PositionalArg(
                name="format",
                help="Document to generate (readme|claude|slides).",
            ),
            OptionalArg(
                short_option="-s",
                long_option="--source",
                help=f"Source content file (default: {DEFAULT_SOURCE}).",
                kwargs={"default": DEFAULT_SOURCE},
            ),
            OptionalArg(
                long_option="--scope",
                help="Content scope (default: overview).",
                kwargs={"choices": SCOPES, "default": "overview"},
            ),
            OptionalArg(
                long_option="--context",
                help="Target context (default: user).",
                kwargs={"choices": CONTEXTS, "default": "user"},
            ),
            OptionalArg(
                short_option="-o",
                long_option="--output",
                help="Output directory. Defaults to the current directory.",
            ),
        ],
        check=_check_gen_format,
    ),
]


##############################################################################


def _version() -> str:
    try:
        return version("ccdcc")
    except PackageNotFoundError:
        return "unknown"


def run_cli(argv: Optional[List[str]] = None):
    """
    Parses command-line arguments and executes the corresponding command.

    Args:
        argv: The command-line arguments. If None, `sys.argv[1:]` is used.
    """
    parser = argparse.ArgumentParser(
        prog="ccdcc",
        description="Document Content Control CLI: ask, lint and generate documents with an AI assistant.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    subparsers = parser.add_subparsers(
        dest="command", help="Sub-commands", required=True
    )

    # Sort commands alphabetically for consistent --help output.
    for command in sorted(_available_commands, key=lambda cmd: cmd.name):
        subparser = subparsers.add_parser(
            command.name, help=command.help, description=command.description
        )
        for arg in command.args:
            arg.add_to_parser(subparser)
        subparser.set_defaults(func=command.func)

    argcomplete.autocomplete(parser)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    """The entry point of the `ccdcc` script."""
    run_cli()


if __name__ == "__main__":
    main()
