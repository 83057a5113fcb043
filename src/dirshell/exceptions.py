class CommandError(Exception):
    """
    Base class for problems with a command typed into the shell.

    Command errors describe bad input, not filesystem failures. The shell loop
    catches them, prints the message, and carries on with the next command.

    Example:
        >>> error = CommandError("Something is wrong with the command")
        >>> str(error)
        'Something is wrong with the command'
    """

    pass


class UnknownCommandError(CommandError):
    """
    Exception raised when the action of a command is not in the dispatch table.

    Attributes:
        action (str): The unrecognized action name.

    Example:
        >>> error = UnknownCommandError("frobnicate")
        >>> str(error)
        "Unknown command: frobnicate. Type 'help' for a list of commands."
    """

    def __init__(self, action: str) -> None:
        """
        Initialize the exception with the unrecognized action.

        Args:
            action (str): The action name that was typed.
        """
        self.action = action
        super().__init__(f"Unknown command: {action}. Type 'help' for a list of commands.")


class CommandUsageError(CommandError):
    """
    Exception raised when a known command gets the wrong arguments or flags.

    Attributes:
        action (str): The command that was misused.
        usage (str): The expected usage line.

    Example:
        >>> error = CommandUsageError("mv", "mv SOURCE DESTINATION")
        >>> str(error)
        'Usage: mv SOURCE DESTINATION'
    """

    def __init__(self, action: str, usage: str) -> None:
        """
        Initialize the exception with the expected usage.

        Args:
            action (str): The command that was misused.
            usage (str): The expected usage line.
        """
        self.action = action
        self.usage = usage
        super().__init__(f"Usage: {usage}")
