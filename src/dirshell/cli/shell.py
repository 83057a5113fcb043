"""Interactive shell over the directory-tree cache.

This module provides the Shell class: the dispatch table mapping command names
to handlers, the "current node" state, all user-facing text, and the
read-eval-print loop. The cache itself never prints; every message the user sees
is produced here from the return values of the core.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Optional, TextIO

from dirshell.cli.colors import BLUE, CYAN, GREEN, RED, YELLOW, Colors
from dirshell.cli.command import Command
from dirshell.exceptions import CommandError, CommandUsageError, UnknownCommandError
from dirshell.file_system_tree.analyzer import FileAnalyzer
from dirshell.file_system_tree.file_system_node import FileSystemNode
from dirshell.file_system_tree.file_system_tree import FileSystemTree
from dirshell.file_system_tree.path_resolver import PathResolver
from dirshell.file_system_tree.tree_builder import TreeBuilder
from dirshell.operations import FileOperations, OperationResult
from dirshell.sizes import format_file_size, parse_file_size
from dirshell.types import SEPARATOR

logger = logging.getLogger(__name__)

DEFAULT_TREE_DEPTH = 2
MAX_PRINT_BYTES = 1024 * 1024


@dataclass(frozen=True)
class CommandSpec:
    """Dispatch table entry for one shell command."""

    handler: Callable[[Command], None]
    usage: str
    description: str
    min_args: int = 0
    max_args: int = 0
    flags: FrozenSet[str] = field(default_factory=frozenset)


class Shell:
    """Command dispatcher and REPL bound to one directory-tree cache.

    Each Shell owns its own current node and is handed the builder that owns the
    tree, so independent shells over independent trees can coexist.

    Attributes:
        builder (TreeBuilder): Builder owning the tree. Must already be loaded.
        tree (FileSystemTree): The builder's tree at construction time.
        resolver (PathResolver): Resolver for shell paths.
        operations (FileOperations): Mutating operations with cache maintenance.
        analyzer (FileAnalyzer): Recursive analyze/find over the cache.
        current (FileSystemNode): The shell's working directory.
        running (bool): False once 'exit' has been executed.

    Example:
        >>> builder = TreeBuilder()  # doctest: +SKIP
        >>> builder.load("/home/u")  # doctest: +SKIP
        >>> shell = Shell(builder)  # doctest: +SKIP
        >>> shell.execute("ls")  # doctest: +SKIP
        docs/  notes.txt
    """

    def __init__(
        self,
        builder: TreeBuilder,
        resolver: Optional[PathResolver] = None,
        stdout: Optional[TextIO] = None,
        colors: Optional[Colors] = None,
    ) -> None:
        if builder.tree is None:
            raise ValueError("The tree builder has not loaded a tree")
        self.builder = builder
        self.tree: FileSystemTree = builder.tree
        self.resolver = resolver if resolver is not None else PathResolver(builder)
        self.operations = FileOperations(builder, self.resolver)
        self.analyzer = FileAnalyzer(builder)
        self.stdout = stdout if stdout is not None else sys.stdout
        self.colors = colors if colors is not None else Colors(enabled=False)
        self.current: FileSystemNode = builder.tree.root
        self.running = False
        self.commands: Dict[str, CommandSpec] = self._build_dispatch_table()

    @property
    def root(self) -> FileSystemNode:
        return self.tree.root

    def _build_dispatch_table(self) -> Dict[str, CommandSpec]:
        exit_spec = CommandSpec(self._exit, "exit", "Leave the shell")
        analyze_spec = CommandSpec(
            self._analyze, "analyze [PATH]", "Show size, file and extension totals", max_args=1
        )
        print_spec = CommandSpec(self._print, "print FILE", "Print the contents of a file", 1, 1)
        return {
            "help": CommandSpec(self._help, "help", "List the available commands"),
            "exit": exit_spec,
            "quit": exit_spec,
            "pwd": CommandSpec(self._pwd, "pwd", "Show the current directory"),
            "cd": CommandSpec(self._cd, "cd [PATH]", "Change directory; no PATH returns to the root", max_args=1),
            "ls": CommandSpec(
                self._ls, "ls [PATH] [--long]", "List a directory", max_args=1, flags=frozenset({"--long"})
            ),
            "tree": CommandSpec(
                self._tree,
                "tree [PATH] [--depth N]",
                "Show a directory as a tree",
                max_args=1,
                flags=frozenset({"--depth"}),
            ),
            "find": CommandSpec(
                self._find,
                "find PATTERN [PATH] [--min-size SIZE]",
                "Find entries whose names match a glob pattern",
                1,
                2,
                frozenset({"--min-size"}),
            ),
            "analyze": analyze_spec,
            "stats": analyze_spec,
            "print": print_spec,
            "cat": print_spec,
            "mkdir": CommandSpec(self._mkdir, "mkdir PATH", "Create a directory", 1, 1),
            "rm": CommandSpec(self._rm, "rm PATH", "Remove a file or directory (recursively)", 1, 1),
            "rename": CommandSpec(self._rename, "rename PATH NEW_NAME", "Rename an entry in place", 2, 2),
            "mv": CommandSpec(self._mv, "mv SOURCE DESTINATION", "Move an entry", 2, 2),
            "cp": CommandSpec(self._cp, "cp SOURCE DESTINATION", "Copy an entry", 2, 2),
        }

    # -- loop ---------------------------------------------------------------

    def prompt(self) -> str:
        return f"{self.current.name} > "

    def run(self, read_line: Optional[Callable[[str], str]] = None) -> None:
        """Read and execute commands until 'exit' or end of input.

        Args:
            read_line: Function that shows a prompt and returns one line.
                Defaults to the builtin input().
        """
        if read_line is None:
            read_line = input
        self.running = True
        while self.running:
            try:
                line = read_line(self.prompt())
            except EOFError:
                self._write("")
                break
            except KeyboardInterrupt:
                self._write("")
                continue
            self.execute_safely(line)

    def execute_safely(self, line: str) -> bool:
        """Execute one line, printing command errors instead of raising them.

        Returns:
            True if the command ran, False if it was rejected.
        """
        try:
            self.execute(line)
        except CommandError as e:
            self._error(str(e))
            return False
        except ValueError as e:
            # Unbalanced quotes from shlex
            self._error(f"Cannot parse command: {e}")
            return False
        return True

    def execute(self, line: str) -> None:
        """Parse and dispatch one input line.

        Raises:
            UnknownCommandError: If the action is not in the dispatch table.
            CommandUsageError: If the arguments or flags do not fit the command.
            ValueError: If the line cannot be tokenized.
        """
        command = Command.parse(line)
        if command is None:
            return
        spec = self.commands.get(command.action)
        if spec is None:
            raise UnknownCommandError(command.action)
        if not spec.min_args <= len(command.args) <= spec.max_args:
            raise CommandUsageError(command.action, spec.usage)
        unexpected = set(command.flags) - spec.flags
        if unexpected:
            raise CommandUsageError(command.action, spec.usage)
        logger.debug("Executing %r", command)
        spec.handler(command)

    # -- output -------------------------------------------------------------

    def _write(self, text: str) -> None:
        self.stdout.write(text + "\n")

    def _error(self, message: str) -> None:
        self._write(self.colors.format(message, RED))

    def _report(self, result: OperationResult, success_message: str) -> None:
        if result:
            self._write(self.colors.format(success_message, GREEN))
        else:
            self._error(f"Error: {result.reason}")
        self._reattach_current()

    def shell_path(self, node: FileSystemNode) -> str:
        """Path of a node as typed in the shell, starting with '/' at the root."""
        relative = os.path.relpath(node.absolute_path, self.root.absolute_path)
        if relative == os.curdir:
            return SEPARATOR
        return SEPARATOR + relative.replace(os.sep, SEPARATOR)

    def _display_name(self, node: FileSystemNode) -> str:
        if node.is_dir:
            return self.colors.format(node.name + SEPARATOR, BLUE)
        return node.name

    def _reattach_current(self) -> None:
        """Point the current node back into the tree after a refresh detached it.

        Looks the old location up again by path; falls back to the root if it no
        longer exists.
        """
        if self.tree.contains(self.current):
            return
        node = self.resolver.resolve_directory(self.root, self.shell_path(self.current))
        self.current = node if node is not None else self.root
        logger.debug("Current directory reattached to %s", self.current.absolute_path)

    def _target(self, path: str) -> FileSystemNode:
        node = self.resolver.resolve(self.current, path)
        if node is None:
            raise CommandError(f"Error: Path {path} not found")
        return node

    # -- handlers -----------------------------------------------------------

    def _help(self, command: Command) -> None:
        width = max(len(spec.usage) for spec in self.commands.values())
        seen = set()
        for spec in self.commands.values():
            if spec.usage in seen:
                continue
            seen.add(spec.usage)
            self._write(f"  {self.colors.format(spec.usage.ljust(width), CYAN)}  {spec.description}")

    def _exit(self, command: Command) -> None:
        self.running = False

    def _pwd(self, command: Command) -> None:
        self._write(self.current.absolute_path)

    def _cd(self, command: Command) -> None:
        if not command.args:
            self.current = self.root
            return
        node = self.resolver.resolve_directory(self.current, command.arg(0))
        if node is None:
            raise CommandError(f"Error: Path {command.arg(0)} not found or is not a directory")
        self.current = node

    def _ls(self, command: Command) -> None:
        node = self._target(command.arg(0)) if command.args else self.current
        if not node.is_dir:
            self._write_entries([node], command.has_flag("--long"))
            return
        self.builder.fetch_children(node)
        if not node.children:
            self._write("Directory is empty.")
            return
        self._write_entries(node.children, command.has_flag("--long"))

    def _write_entries(self, nodes: Iterable[FileSystemNode], long: bool) -> None:
        if long:
            for node in nodes:
                size = "-" if node.is_dir else node.entry.formatted_size
                self._write(f"{size:>12}  {self._display_name(node)}")
        else:
            self._write("  ".join(self._display_name(node) for node in nodes))

    def _tree(self, command: Command) -> None:
        node = self._target(command.arg(0)) if command.args else self.current
        depth_flag = command.flag("--depth")
        try:
            depth = int(depth_flag) if depth_flag is not None else DEFAULT_TREE_DEPTH
        except ValueError:
            raise CommandUsageError(command.action, self.commands["tree"].usage)
        if depth < 1:
            raise CommandUsageError(command.action, self.commands["tree"].usage)

        # Fetch down to the requested depth, then render what is cached
        level = [node]
        for _ in range(depth):
            next_level = []
            for directory in level:
                self.builder.fetch_children(directory)
                next_level.extend(child for child in directory.children if child.is_dir)
            level = next_level

        for line in self.tree.stream_tree_representation(node, max_depth=depth):
            self._write(line)

    def _find(self, command: Command) -> None:
        start = self._target(command.arg(1)) if len(command.args) > 1 else self.current
        if not start.is_dir:
            raise CommandError(f"Error: Path {command.arg(1)} is not a directory")
        min_size = None
        if command.has_flag("--min-size"):
            try:
                min_size = parse_file_size(command.flag("--min-size") or "")
            except ValueError as e:
                raise CommandError(f"Error: {e}")

        matches = self.analyzer.find(start, command.arg(0), min_size=min_size)
        if not matches:
            self._write("No matches.")
            return
        for node in matches:
            path = self.shell_path(node)
            self._write(self.colors.format(path + SEPARATOR, BLUE) if node.is_dir else path)

    def _analyze(self, command: Command) -> None:
        node = self._target(command.arg(0)) if command.args else self.current
        result = self.analyzer.analyze(node)
        self._write(f"Total size: {result.formatted_size}")
        self._write(f"Files: {result.file_count}")
        self._write(f"Directories: {result.directory_count}")
        if result.extensions:
            self._write("Extensions:")
            ranked = sorted(result.extensions.items(), key=lambda item: (-item[1], item[0]))
            for extension, count in ranked:
                self._write(f"  {self.colors.format(extension, YELLOW)}: {count}")

    def _print(self, command: Command) -> None:
        node = self._target(command.arg(0))
        if node.is_dir:
            raise CommandError(f"Error: {command.arg(0)} is a directory")
        try:
            with open(node.absolute_path, "rb") as f:
                data = f.read(MAX_PRINT_BYTES)
                truncated = bool(f.read(1))
        except OSError as e:
            raise CommandError(f"Error: Cannot read {command.arg(0)}: {e.strerror or e}")
        content = data.decode("utf-8", errors="replace")
        self.stdout.write(content)
        if content and not content.endswith("\n"):
            self.stdout.write("\n")
        if truncated:
            self._write(self.colors.format(f"[truncated after {format_file_size(MAX_PRINT_BYTES)}]", YELLOW))

    def _mkdir(self, command: Command) -> None:
        self._report(self.operations.mkdir(self.current, command.arg(0)), f"Created {command.arg(0)}")

    def _rm(self, command: Command) -> None:
        self._report(self.operations.remove(self.current, command.arg(0)), f"Removed {command.arg(0)}")

    def _rename(self, command: Command) -> None:
        result = self.operations.rename(self.current, command.arg(0), command.arg(1))
        self._report(result, f"Renamed {command.arg(0)} to {command.arg(1)}")

    def _mv(self, command: Command) -> None:
        result = self.operations.move(self.current, command.arg(0), command.arg(1))
        self._report(result, f"Moved {command.arg(0)} to {command.arg(1)}")

    def _cp(self, command: Command) -> None:
        result = self.operations.copy(self.current, command.arg(0), command.arg(1))
        self._report(result, f"Copied {command.arg(0)} to {command.arg(1)}")
