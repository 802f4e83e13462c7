"""
Go-specific naming utilities and sanitization.

Handles Go reserved words, identifier rules and string literal quoting.
"""

import re

from ...core.naming import CollisionPolicy, NameSanitizer


# Go reserved words
GO_RESERVED_WORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

# Letter or underscore, then letters, digits or underscores
_GO_IDENTIFIER = re.compile(r"^[^\W\d]\w*$")


def is_go_identifier(name: str) -> bool:
    """Check whether ``name`` is a syntactically valid Go identifier."""
    return bool(_GO_IDENTIFIER.match(name)) and name not in GO_RESERVED_WORDS


def create_go_sanitizer(
    strip_underscores: bool = False,
    collision_policy: CollisionPolicy = CollisionPolicy.ERROR,
) -> NameSanitizer:
    """Create a name sanitizer configured for Go."""
    return NameSanitizer(
        GO_RESERVED_WORDS,
        strip_underscores=strip_underscores,
        collision_policy=collision_policy,
        is_identifier=is_go_identifier,
    )


_GO_ESCAPES = {
    "\a": r"\a",
    "\b": r"\b",
    "\f": r"\f",
    "\n": r"\n",
    "\r": r"\r",
    "\t": r"\t",
    "\v": r"\v",
    "\\": r"\\",
    '"': r"\"",
}


def go_quote(s: str) -> str:
    """Render ``s`` as a double-quoted Go string literal."""
    out = []
    for ch in str(s):
        if ch in _GO_ESCAPES:
            out.append(_GO_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def validate_go_package_name(name: str) -> list[str]:
    """
    Validate Go package name according to Go naming rules.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors

    if not _GO_IDENTIFIER.match(name):
        errors.append(f"'{name}' is not a valid Go identifier")

    if name[0].isupper():
        errors.append("Package names should be lowercase")

    if name in GO_RESERVED_WORDS:
        errors.append(f"'{name}' is a Go reserved word")

    return errors
