"""ANSI color formatting for shell output."""

RESET = "\x1b[0m"
RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
BLUE = "\x1b[34m"
CYAN = "\x1b[36m"


class Colors:
    """Wraps text in ANSI color codes when enabled.

    Example:
        >>> Colors(enabled=False).format("plain", RED)
        'plain'
        >>> Colors(enabled=True).format("alert", RED) == RED + "alert" + RESET
        True
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def format(self, text: str, color: str) -> str:
        if not self.enabled:
            return text
        return f"{color}{text}{RESET}"
