"""Permission action enum for reporting listing failures during lazy population."""

from enum import Enum


class PermissionAction(str, Enum):
    """Action to take when a directory cannot be listed while fetching children.

    In both cases the directory is left without children and no exception reaches
    the caller; the actions differ only in whether the failure is reported.

    Values:
        IGNORE: Skip the unreadable directory silently (default behavior)
        WARN: Skip the unreadable directory and log a warning
    """

    IGNORE = "ignore"
    WARN = "warn"
