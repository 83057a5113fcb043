"""Exclusion rule hiding dot-prefixed entries."""

from .base_rules import BaseExclusionRules

HIDDEN_PREFIX = "."


class HiddenEntryExclusionRules(BaseExclusionRules):
    """Exclude every entry whose name begins with the hidden-file marker.

    Only the last path segment is inspected, so a visible file inside a hidden
    directory is not excluded by this rule on its own. Directory paths may carry
    a trailing slash.

    Example:
        >>> rules = HiddenEntryExclusionRules()
        >>> rules.exclude(".git/")
        True
        >>> rules.exclude("docs/.env")
        True
        >>> rules.exclude("docs/readme.md")
        False
    """

    def exclude(self, path: str) -> bool:
        name = path.rstrip("/").rsplit("/", 1)[-1]
        return name.startswith(HIDDEN_PREFIX)
