from abc import ABC, abstractmethod
from typing import Sequence, Union

from dirshell.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for directory-entry exclusion rules.

    Exclusion rules decide which entries of a directory listing are materialized as
    cache nodes. All implementations must provide logic for checking if a given path
    should be excluded. File loading and individual rule addition are optional
    capabilities that depend on the rule type.

    Paths passed to ``exclude`` are relative to the root of the cached tree, use
    forward slashes, and carry a trailing slash when they name a directory.

    Example:
        >>> from dirshell.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> git_rules = GitIgnoreExclusionRules()
        >>> git_rules.add_rule('*.pyc')  # Add rule programmatically
        >>> git_rules.exclude('test.pyc')
        True
        >>> git_rules.exclude('test.py')
        False
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if a given path should be excluded based on the loaded rules.

        Args:
            path (str): The relative path to check, with a trailing slash for directories.

        Returns:
            bool: True if the path should be excluded, False if it should be included.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load and parse exclusion rules from one or more files.

        Rule types that don't support file operations use the default implementation
        which raises NotImplementedError.

        Args:
            rules_files: Path to a file or sequence of paths containing exclusion rules.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist (for file-supporting rule types).
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule directly.

        Args:
            rule (str): The exclusion rule to add (e.g., a gitignore pattern like "*.pyc").

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
