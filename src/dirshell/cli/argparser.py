"""Command-line argument parsing for dirshell.

This module defines the command-line interface for dirshell,
handling argument parsing and validation.
"""

import argparse
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from dirshell import __version__
from dirshell.exclusion_rules.base_rules import BaseExclusionRules


def create_exclusion_action(exclusion_rules: BaseExclusionRules) -> Type[argparse.Action]:
    """Create a custom action class for handling exclusion rules.

    This factory function creates an action class that will update the provided
    exclusion rules object as arguments are processed. This preserves the exact
    order of exclusion specifications as they appear on the command line.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class ExclusionRulesAction(argparse.Action):
        """Action to update exclusion rules as arguments are processed."""

        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return
            if option_string in ("-e", "--exclude"):
                if isinstance(values, (str, os.PathLike)):
                    exclusion_rules.load_rules(values)
                else:
                    exclusion_rules.load_rules(Path(str(values)))
                dest = "exclude"
            else:  # -i/--ignore
                exclusion_rules.add_rule(str(values))
                dest = "ignore"

            if getattr(namespace, dest, None) is None:
                setattr(namespace, dest, [])
            getattr(namespace, dest).append(values)

    return ExclusionRulesAction


def create_parser(exclusion_rules: BaseExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        An ArgumentParser instance configured with dirshell's options.
    """
    description = """
    dirshell: An interactive shell over a cached view of a directory tree.

    The shell starts in ROOT and keeps an in-memory mirror of the directories you
    visit. Directories are listed from disk the first time you enter or list them,
    and listed again only after a command of this shell changes them. Paths that
    start with '/' are resolved from ROOT, not from the filesystem root.

    Commands: help, exit, pwd, cd, ls, tree, find, analyze, print, mkdir, rm,
    rename, mv, cp. Type 'help' inside the shell for usage.
    """

    epilog = """
    Examples:
      # Browse your home directory
      dirshell

      # Browse a project, hiding build output
      dirshell -i "build/" -i "*.pyc" /path/to/project

      # Use a project's .gitignore and include dot-files
      dirshell -a -e /path/to/project/.gitignore /path/to/project

      # Run commands without entering the interactive loop
      dirshell -c "ls" -c "analyze" /path/to/project

      # Let '..' move to the parent directory
      dirshell --ascend-parent /path/to/project
    """

    parser = argparse.ArgumentParser(
        prog="dirshell",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"dirshell {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(exclusion_rules)

    parser.add_argument(
        "root",
        type=Path,
        nargs="?",
        default=Path.home(),
        help="The directory the shell starts in and treats as '/' (default: your home directory).",
    )
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="Show entries whose names start with '.'. Hidden by default.",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="FILE",
        action=ExclusionAction,
        help="Path to a gitignore-style file listing entries to hide (can be specified multiple times).",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        type=str,
        metavar="PATTERN",
        action=ExclusionAction,
        help="Gitignore-style pattern of entries to hide (can be specified multiple times).",
    )
    parser.add_argument(
        "--eager",
        action="store_true",
        help="Cache the whole tree at startup instead of on demand. Only suitable for small trees.",
    )
    parser.add_argument(
        "--ascend-parent",
        action="store_true",
        help="Make '..' path segments move to the parent directory. By default '..' is ignored.",
    )
    parser.add_argument(
        "-P",
        "--permission-action",
        choices=["ignore", "warn"],
        default="ignore",
        help="How to report directories that cannot be listed (default: ignore).",
    )
    parser.add_argument(
        "-c",
        "--command",
        metavar="COMMAND",
        action="append",
        dest="commands",
        help="Execute COMMAND and exit instead of starting the interactive loop (can be repeated).",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output. Color is also disabled when stdout is not a terminal.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log cache activity (fetches, refreshes) to stderr.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.commands is not None and any(not command.strip() for command in args.commands):
        raise ValueError("-c/--command requires a non-empty command")
