"""
Go source formatting via the external ``gofmt`` binary.
"""

import re
import shutil
import subprocess
from typing import Optional

from ....logging_config import get_logger

logger = get_logger(__name__)

_LEADING_TABS = re.compile(r"^\t+", re.MULTILINE)


class FormatterError(Exception):
    """Raised when gofmt is unavailable or rejects the generated source."""

    pass


class GoFormatter:
    """Pipes source through gofmt and optionally indents with spaces."""

    def __init__(
        self,
        tab_width: int = 4,
        use_spaces: bool = True,
        gofmt_path: Optional[str] = None,
    ):
        self.tab_width = tab_width
        self.use_spaces = use_spaces
        self.gofmt_path = gofmt_path

    def _binary(self) -> str:
        path = self.gofmt_path or shutil.which("gofmt")
        if not path:
            raise FormatterError(
                "gofmt not found in PATH; install Go or disable formatting with --nofmt"
            )
        return path

    def format(self, code: str) -> str:
        """
        Format Go source.

        Raises:
            FormatterError: If gofmt is missing or exits non-zero
        """
        binary = self._binary()
        logger.debug("Running %s on %d bytes", binary, len(code))

        try:
            proc = subprocess.run(
                [binary],
                input=code,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise FormatterError(f"Failed to run {binary}: {e}") from e

        if proc.returncode != 0:
            raise FormatterError(proc.stderr.strip() or f"gofmt exited with {proc.returncode}")

        formatted = proc.stdout
        if self.use_spaces:
            formatted = self.expand_indentation(formatted)
        return formatted

    def expand_indentation(self, code: str) -> str:
        """Replace leading indentation tabs with ``tab_width`` spaces each."""
        return _LEADING_TABS.sub(
            lambda m: " " * (len(m.group(0)) * self.tab_width), code
        )
