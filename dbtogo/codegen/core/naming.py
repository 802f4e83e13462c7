"""
Naming utilities for safe code generation.

Maps raw schema identifiers onto identifiers that are safe to use in
generated code, and detects when two raw names collapse onto the same
clean name.
"""

import re
from enum import Enum
from typing import Callable, Dict, Optional, Set

from ...logging_config import get_logger

logger = get_logger(__name__)


class NameCollisionError(Exception):
    """Raised when two raw identifiers sanitize to the same clean name."""

    def __init__(self, clean_name: str, first: str, second: str, scope: str = ""):
        self.clean_name = clean_name
        self.first = first
        self.second = second
        self.scope = scope
        where = f" in {scope}" if scope else ""
        super().__init__(
            f"Names '{first}' and '{second}'{where} both map to '{clean_name}'"
        )


class CollisionPolicy(Enum):
    """What to do when two raw names share a clean name."""

    ERROR = "error"  # raise NameCollisionError
    SUFFIX = "suffix"  # later names get a numeric suffix: Name2, Name3, ...


def capitalize(s: str) -> str:
    """Upper-case the first character, leaving the rest unchanged."""
    if not s:
        return ""
    first = s[0].upper()
    # Characters such as "ß" upper-case to more than one rune
    if len(first) != 1:
        first = s[0]
    return first + s[1:]


def nounderscore(s: str) -> str:
    """Remove every underscore from the string."""
    return s.replace("_", "")


class NameSanitizer:
    """Turns raw identifiers into capitalized, valid target identifiers."""

    def __init__(
        self,
        reserved_words: Set[str] = None,
        strip_underscores: bool = False,
        collision_policy: CollisionPolicy = CollisionPolicy.ERROR,
        is_identifier: Optional[Callable[[str], bool]] = None,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            strip_underscores: Delete underscores before capitalizing
            collision_policy: How clashing clean names are handled
            is_identifier: Predicate for valid identifiers in the target language
        """
        self.reserved_words = reserved_words or set()
        self.strip_underscores = strip_underscores
        self.collision_policy = collision_policy
        self._is_identifier = is_identifier or str.isidentifier

    def is_valid(self, name: str) -> bool:
        # Underscore-only names are blank identifiers
        if not name.strip("_"):
            return False
        return self._is_identifier(name) and name not in self.reserved_words

    def sanitize(self, raw: str) -> str:
        """
        Sanitize a raw identifier.

        Capitalizes the first character and leaves the remainder alone,
        after removing underscores when that transform is enabled. Names
        that are still invalid get their offending characters replaced.

        Args:
            raw: Identifier as reported by the database

        Returns:
            Clean identifier
        """
        name = nounderscore(raw) if self.strip_underscores else raw
        name = capitalize(name)

        if not self.is_valid(name):
            name = self._clean_basic(name)

        return name

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        replacement = "" if self.strip_underscores else "_"
        cleaned = re.sub(r"\W", replacement, name)

        # Ensure not empty
        if not cleaned.strip("_"):
            cleaned = "Field"

        # Ensure doesn't start with number
        if cleaned[0].isdigit():
            cleaned = f"X{cleaned}"

        cleaned = capitalize(cleaned)
        if cleaned in self.reserved_words:
            cleaned = f"{cleaned}_"

        return cleaned

    def resolve(self, raw: str, used: Dict[str, str], scope: str = "") -> str:
        """
        Sanitize ``raw`` and claim the result inside a naming scope.

        Args:
            raw: Identifier as reported by the database
            used: Scope state mapping clean names to the raw name that owns them
            scope: Human readable scope description for error messages

        Returns:
            Clean identifier, unique within ``used``

        Raises:
            NameCollisionError: If the name is taken and the policy is ERROR
        """
        clean = self.sanitize(raw)

        if clean in used and used[clean] != raw:
            if self.collision_policy == CollisionPolicy.ERROR:
                raise NameCollisionError(clean, used[clean], raw, scope)

            original = clean
            counter = 2
            while clean in used:
                clean = f"{original}{counter}"
                counter += 1
            logger.warning(
                "Renamed '%s'%s to '%s' to avoid clashing with '%s'",
                raw,
                f" in {scope}" if scope else "",
                clean,
                used[original],
            )

        used[clean] = raw
        return clean
