"""
Bundle configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from common.exceptions import InvalidConfigError, MissingConfigError

DEFAULT_DST_DIR = "output"
DEFAULT_LAUNCHER = "sharun"
DEFAULT_PROBER = "ldd"
DEFAULT_STRIPPER = "strip"

SHARED_DIR = "shared"
BIN_DIR = "bin"
LIB_DIR = "lib"


@dataclass
class BundleConfig:
    """Options for one bundling run."""
    dst_dir: str = DEFAULT_DST_DIR
    strip: bool = False
    one_dir: bool = True
    create_links: bool = True
    launcher_name: str = DEFAULT_LAUNCHER
    prober_tool: str = DEFAULT_PROBER
    strip_tool: str = DEFAULT_STRIPPER
    # None means the process PATH
    search_path: Optional[str] = None

    def __post_init__(self):
        if self.one_dir and not self.dst_dir:
            self.dst_dir = DEFAULT_DST_DIR
        self.validate()

    def validate(self) -> None:
        if not self.dst_dir:
            raise MissingConfigError("dst_dir")
        if not self.launcher_name:
            raise MissingConfigError("launcher_name")
        if "/" in self.launcher_name:
            raise InvalidConfigError(
                "launcher_name", self.launcher_name, "must be a bare file name"
            )

    @property
    def destination(self) -> Path:
        return Path(self.dst_dir)

    @property
    def launcher_link_target(self) -> str:
        """Relative symlink target from ``bin/`` to the launcher."""
        return f"../{self.launcher_name}"
