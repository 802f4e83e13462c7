"""
Word inflection for template helpers.

An ``Inflector`` owns its rule set: custom plural, singular and human
suffix rules, irregular pairs, uncountable words and acronyms. Base
English rules come from a private ``inflect.engine()``, so rules added
through one inflector never leak into another.
"""

import re
from typing import Callable, Dict, List, Optional, Set, Tuple

import inflect

from .naming import capitalize


def _match_case(source: str, target: str) -> str:
    """Give ``target`` the capitalization pattern of ``source``."""
    if len(source) > 1 and source.isupper():
        return target.upper()
    if source[:1].isupper():
        return capitalize(target)
    return target


# Endings of singular nouns that inflect reads as plurals (class, bus, axis)
_SINGULAR_ENDINGS = ("ss", "us", "sis", "xis", "ias")


class Inflector:
    """Pluralization, singularization and case conversion with local rules."""

    def __init__(self):
        self._engine = inflect.engine()
        self._plurals: List[Tuple[str, str]] = []
        self._singulars: List[Tuple[str, str]] = []
        self._humans: List[Tuple[str, str]] = []
        self._irregular_plurals: Dict[str, str] = {}  # singular -> plural
        self._irregular_singulars: Dict[str, str] = {}  # plural -> singular
        self._uncountables: Set[str] = set()
        self._acronyms: Dict[str, str] = {}  # lower-case -> canonical form
        self._acronym_regex: Optional[re.Pattern] = None

    # Rule registration

    def add_plural(self, suffix: str, replacement: str) -> None:
        """Words ending in ``suffix`` pluralize by swapping in ``replacement``."""
        self._plurals.append((suffix.lower(), replacement))

    def add_singular(self, suffix: str, replacement: str) -> None:
        """Words ending in ``suffix`` singularize by swapping in ``replacement``."""
        self._singulars.append((suffix.lower(), replacement))

    def add_human(self, suffix: str, replacement: str) -> None:
        """Words ending in ``suffix`` humanize by swapping in ``replacement``."""
        self._humans.append((suffix.lower(), replacement))

    def add_irregular(self, singular: str, plural: str) -> None:
        self._irregular_plurals[singular.lower()] = plural.lower()
        self._irregular_singulars[plural.lower()] = singular.lower()

    def add_uncountable(self, word: str) -> None:
        self._uncountables.add(word.lower())

    def add_acronym(self, word: str) -> None:
        self._acronyms[word.lower()] = word
        alternatives = "|".join(
            re.escape(a) for a in sorted(self._acronyms.values(), key=len, reverse=True)
        )
        self._acronym_regex = re.compile(
            rf"(?:(?<=([A-Za-z\d]))|\b)({alternatives})(?=\b|[^a-z])"
        )

    # Number inflection

    def pluralize(self, word: str) -> str:
        return self._apply_to_tail(word, self._pluralize_word)

    def singularize(self, word: str) -> str:
        return self._apply_to_tail(word, self._singularize_word)

    def _apply_to_tail(self, word: str, inflector: Callable[[str], str]) -> str:
        """Inflect only the last word of a compound identifier."""
        if not word:
            return word
        match = re.match(r"^(.*?)([A-Z]?[a-z]+)$", word) or re.match(
            r"^(.*?)([^\W\d_]+)$", word
        )
        if not match:
            return word
        prefix, tail = match.groups()
        return prefix + inflector(tail)

    def _pluralize_word(self, word: str) -> str:
        lower = word.lower()
        if lower in self._uncountables:
            return word
        if lower in self._irregular_plurals:
            return _match_case(word, self._irregular_plurals[lower])
        if lower in self._irregular_singulars:
            return word

        for suffix, replacement in reversed(self._plurals):
            if lower.endswith(suffix):
                return word[: len(word) - len(suffix)] + replacement

        # Already plural
        if self._singular_form(word):
            return word
        return self._engine.plural_noun(word) or word

    def _singularize_word(self, word: str) -> str:
        lower = word.lower()
        if lower in self._uncountables:
            return word
        if lower in self._irregular_singulars:
            return _match_case(word, self._irregular_singulars[lower])
        if lower in self._irregular_plurals:
            return word

        for suffix, replacement in reversed(self._singulars):
            if lower.endswith(suffix):
                return word[: len(word) - len(suffix)] + replacement

        return self._singular_form(word) or word

    def _singular_form(self, word: str) -> Optional[str]:
        """The singular of ``word`` if it is a plural noun, else None."""
        if word.lower().endswith(_SINGULAR_ENDINGS):
            return None
        singular = self._engine.singular_noun(word)
        if not singular or self._engine.plural_noun(singular).lower() != word.lower():
            return None
        return singular

    # Case conversion

    def camelize(self, word: str, upper_first: bool = True) -> str:
        """``user_account`` -> ``UserAccount`` (``userAccount`` when lower first)."""
        parts = [p for p in re.split(r"[\W_]+", word) if p]
        converted = []
        for index, part in enumerate(parts):
            acronym = self._acronyms.get(part.lower())
            if index == 0 and not upper_first:
                converted.append(part.lower() if acronym else part[0].lower() + part[1:])
            elif acronym:
                converted.append(acronym)
            else:
                converted.append(capitalize(part))
        return "".join(converted)

    def camelize_down_first(self, word: str) -> str:
        return self.camelize(word, upper_first=False)

    def underscore(self, word: str) -> str:
        """``UserAccount`` -> ``user_account``, honoring registered acronyms."""
        if not re.search(r"[A-Z-]", word):
            return word
        result = word
        if self._acronym_regex is not None:
            result = self._acronym_regex.sub(
                lambda m: ("_" if m.group(1) else "") + m.group(2).lower(), result
            )
        result = re.sub(r"([A-Z\d]+)([A-Z][a-z])", r"\1_\2", result)
        result = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", result)
        return result.replace("-", "_").lower()

    def humanize(self, word: str) -> str:
        """``author_id`` -> ``Author``; ``first_name`` -> ``First name``."""
        result = word
        lower = word.lower()
        for suffix, replacement in reversed(self._humans):
            if lower.endswith(suffix):
                result = word[: len(word) - len(suffix)] + replacement
                break

        if result.endswith("_id"):
            result = result[:-3]
        words = [
            self._acronyms.get(w.lower(), w.lower()) for w in result.split("_") if w
        ]
        return capitalize(" ".join(words))

    def typeify(self, word: str) -> str:
        """``blog_posts`` -> ``BlogPost``."""
        return self.camelize(self.singularize(word))

    def tableize(self, word: str) -> str:
        """``BlogPost`` -> ``blog_posts``."""
        return self.pluralize(self.underscore(self.typeify(word)))
