"""Command-line interface for dirshell.

This module provides the entry point for dirshell: it parses the command line,
configures logging, loads the directory-tree cache, and either runs the
commands given with -c or starts the interactive loop.

Exit Codes:
    0: Successful completion
    1: Runtime error (root path missing, or a -c command was rejected)
    2: Command-line syntax error
    130: Interrupted by SIGINT (Ctrl+C) outside of a prompt

Example:
    # Start in the home directory
    $ dirshell

    # Start in a project, hiding build output
    $ dirshell -i "build/" /path/to/project
"""

import logging
import sys

from dirshell.cli.argparser import create_parser, validate_args
from dirshell.cli.colors import GREEN, Colors
from dirshell.cli.shell import Shell
from dirshell.exclusion_rules.git_rules import GitIgnoreExclusionRules
from dirshell.file_system_tree.path_resolver import PathResolver
from dirshell.file_system_tree.permission_action import PermissionAction
from dirshell.file_system_tree.tree_builder import TreeBuilder

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main() -> None:
    """Main entry point for the dirshell command-line interface.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Command-line syntax error
        130: Interrupted by SIGINT (Ctrl+C)
    """
    try:
        # Create the exclusion rules object that will be populated during parsing
        exclusion_rules = GitIgnoreExclusionRules()

        parser = create_parser(exclusion_rules)
        args = parser.parse_args()
        validate_args(args)
        configure_logging(args.verbose)

        builder = TreeBuilder(
            exclusion_rules=exclusion_rules if exclusion_rules.has_rules() else None,
            permission_action=PermissionAction(args.permission_action),
            show_hidden=args.all,
        )
        tree = builder.load_eager(args.root) if args.eager else builder.load(args.root)
        if tree is None:
            print(f"Error: Root path does not exist: {args.root}", file=sys.stderr)
            sys.exit(1)

        colors = Colors(enabled=not args.no_color and sys.stdout.isatty())
        shell = Shell(
            builder,
            resolver=PathResolver(builder, parent_segment_ascends=args.ascend_parent),
            colors=colors,
        )

        if args.commands:
            results = [shell.execute_safely(command) for command in args.commands]
            if not all(results):
                sys.exit(1)
            return

        print(colors.format(f"Initializing system at: {tree.root.absolute_path}", GREEN))
        shell.run()

    except KeyboardInterrupt:
        sys.exit(130)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
