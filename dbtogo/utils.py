"""Utility functions for command-line provenance and output handling.

This module provides the helpers the CLI uses to record how it was invoked
and to write generated code without ever leaving a truncated file behind.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, TextIO

from .codegen.languages.go.naming import go_quote
from .logging_config import get_logger

logger = get_logger(__name__)

PROGRAM_NAME = "dbtogo"


class OutputError(Exception):
    """Custom exception for output writing errors."""

    pass


def quote_args(argv: List[str], program: str = PROGRAM_NAME) -> List[str]:
    """Build the provenance argument list.

    Args:
        argv: Command-line arguments without the program name.
        program: Name recorded as the first element, left unquoted.

    Returns:
        The program name followed by every argument as a Go string literal.
    """
    return [program] + [go_quote(arg) for arg in argv]


def strip_dsn(args: List[str], dsn: str) -> List[str]:
    """Return ``args`` without the last occurrence of the quoted DSN."""
    quoted = go_quote(dsn)
    for index in range(len(args) - 1, 0, -1):
        if args[index] == quoted:
            return args[:index] + args[index + 1 :]
    return list(args)


def write_output(
    code: str, destination: Optional[str | Path], stream: Optional[TextIO] = None
) -> Optional[Path]:
    """Write generated code to a file or to standard output.

    Files are written to a temporary sibling first and then renamed over the
    destination, so an interrupted run never truncates an existing file.

    Args:
        code: Text to write.
        destination: Target path; ``None``, ``""`` or ``"-"`` mean the stream.
        stream: Stream used for stdout output (defaults to ``sys.stdout``).

    Returns:
        The path written, or None when writing to the stream.

    Raises:
        OutputError: If the file cannot be written.
    """
    if destination in (None, "", "-"):
        stream = stream or sys.stdout
        stream.write(code)
        stream.flush()
        return None

    path = Path(destination)
    logger.debug("Writing %d bytes to %s", len(code), path)

    try:
        fd, tmp_path_str = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise OutputError(f"Failed to write {path}: {e}") from e

    tmp_path = Path(tmp_path_str)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(code)
        os.chmod(tmp_path, 0o644)
        tmp_path.replace(path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise OutputError(f"Failed to write {path}: {e}") from e

    logger.info("Wrote generated code to %s", path)
    return path
