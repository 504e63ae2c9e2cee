"""
Debug-symbol stripping via the external ``strip`` tool.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Union

from common.exceptions import StripError, ToolMissingError

logger = logging.getLogger(__name__)


class Stripper:
    """Strips files in place when enabled; otherwise does nothing."""

    def __init__(self, enabled: bool = False, tool: str = "strip", search_path: Optional[str] = None):
        self.enabled = enabled
        self.tool = tool
        self.search_path = search_path
        self._tool_path: Optional[str] = None

    def _locate(self) -> str:
        if self._tool_path is None:
            found = shutil.which(self.tool, path=self.search_path)
            if found is None:
                raise ToolMissingError(self.tool)
            self._tool_path = found
        return self._tool_path

    def strip(self, path: Union[str, Path]) -> None:
        """
        Strip ``path`` in place.

        Raises:
            ToolMissingError: Stripping is enabled and the tool is not found.
            StripError: The tool exited non-zero.
        """
        if not self.enabled:
            return

        tool_path = self._locate()
        try:
            result = subprocess.run(
                [tool_path, str(path)],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise StripError(str(path), str(e)) from e

        if result.returncode != 0:
            raise StripError(str(path), result.stderr.strip() or f"exit status {result.returncode}")

        logger.debug(f"Stripped {path}")
