"""Tokenization of shell input lines into commands."""

import shlex
from typing import Dict, List, Optional

FLAG_PREFIX = "--"
FLAG_PRESENT = "true"


class Command:
    """A parsed shell input line.

    The first token, lower-cased, is the action. Tokens starting with '--' are
    flags; a flag takes the following token as its value unless that token is
    itself a flag or missing, in which case the value is "true". All other
    tokens are positional arguments. Quoting follows POSIX shell rules.

    Attributes:
        input (str): The raw input line.
        action (str): The lower-cased command name.
        args (List[str]): Positional arguments.
        flags (Dict[str, str]): Flags keyed by name including the leading '--'.

    Example:
        >>> cmd = Command.parse('find "my docs" --name *.txt --verbose')
        >>> cmd.action, cmd.args, cmd.flags
        ('find', ['my docs'], {'--name': '*.txt', '--verbose': 'true'})
    """

    def __init__(self, input: str, action: str, args: List[str], flags: Dict[str, str]) -> None:
        self.input = input
        self.action = action
        self.args = args
        self.flags = flags

    @classmethod
    def parse(cls, input: str) -> Optional["Command"]:
        """Parse an input line.

        Args:
            input: The line typed by the user.

        Returns:
            The parsed command, or None for a blank line.

        Raises:
            ValueError: If quoting is unbalanced.
        """
        tokens = shlex.split(input)
        if not tokens:
            return None

        action = tokens.pop(0).lower()
        args: List[str] = []
        flags: Dict[str, str] = {}
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token.startswith(FLAG_PREFIX):
                if i + 1 < len(tokens) and not tokens[i + 1].startswith(FLAG_PREFIX):
                    flags[token] = tokens[i + 1]
                    i += 1
                else:
                    flags[token] = FLAG_PRESENT
            else:
                args.append(token)
            i += 1
        return cls(input, action, args, flags)

    def arg(self, index: int) -> str:
        """Return a positional argument, or an empty string if it is missing."""
        return self.args[index] if 0 <= index < len(self.args) else ""

    def flag(self, key: str) -> Optional[str]:
        return self.flags.get(key)

    def has_flag(self, key: str) -> bool:
        return key in self.flags

    def __repr__(self) -> str:
        return f"Command(action={self.action!r}, args={self.args!r}, flags={self.flags!r})"
