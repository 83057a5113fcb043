"""Exclusion rules deciding which directory entries the cache makes visible."""

from .base_rules import BaseExclusionRules
from .composite_rules import CompositeExclusionRules
from .git_rules import GitIgnoreExclusionRules
from .hidden_rules import HiddenEntryExclusionRules

__all__ = [
    "BaseExclusionRules",
    "CompositeExclusionRules",
    "GitIgnoreExclusionRules",
    "HiddenEntryExclusionRules",
]
