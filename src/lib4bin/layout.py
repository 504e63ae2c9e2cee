"""
Output layout builder - the only writer of the bundle directory tree.

Layout under the destination root::

    <launcher>              relocatable launcher, copied once per run
    bin/<name>              static binary copy, or symlink to ../<launcher>
    shared/bin/<name>       original dynamic binaries
    shared/lib/<base-name>  deduplicated shared-library closure
"""

from __future__ import annotations

import logging
import os
import shutil
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Set

from common.exceptions import LauncherMissingError, LayoutIOError
from utils.atomic_write import atomic_copy_file

from .config import BIN_DIR, LIB_DIR, SHARED_DIR, BundleConfig
from .models import Binary, Library
from .stripper import Stripper

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


@contextmanager
def _io(path: Path, operation: str) -> Iterator[None]:
    """Re-raise filesystem errors as LayoutIOError naming ``path``."""
    try:
        yield
    except OSError as e:
        raise LayoutIOError(str(path), operation, cause=e) from e


class LayoutBuilder:
    """
    Performs every copy, link, strip and chmod on the output tree.

    Static and shared binary copies overwrite existing files; bin symlinks
    and libraries never replace what is already there.
    """

    def __init__(self, config: BundleConfig, stripper: Optional[Stripper] = None):
        self.config = config
        self.root = config.destination
        self.stripper = stripper or Stripper(
            enabled=config.strip,
            tool=config.strip_tool,
            search_path=config.search_path,
        )
        self._lock = threading.RLock()
        self._launcher_installed = False
        self._copied_libraries: Set[str] = set()

    # -- paths ---------------------------------------------------------------

    @property
    def bin_dir(self) -> Path:
        return self.root / BIN_DIR

    @property
    def shared_bin_dir(self) -> Path:
        return self.root / SHARED_DIR / BIN_DIR

    @property
    def shared_lib_dir(self) -> Path:
        return self.root / SHARED_DIR / LIB_DIR

    @property
    def launcher_path(self) -> Path:
        return self.root / self.config.launcher_name

    @property
    def launcher_installed(self) -> bool:
        return self._launcher_installed

    @property
    def copied_libraries(self) -> Set[str]:
        """Base names already present in ``shared/lib`` for this run."""
        with self._lock:
            return set(self._copied_libraries)

    # -- helpers -------------------------------------------------------------

    def _mkdir(self, path: Path) -> None:
        with _io(path, "mkdir"):
            path.mkdir(parents=True, exist_ok=True)

    def _copy(self, src: Path, dst: Path, mode: Optional[int] = None) -> None:
        with _io(dst, f"copy from {src}"):
            atomic_copy_file(src, dst, mode=mode)

    # -- operations ----------------------------------------------------------

    def ensure_root(self) -> Path:
        self._mkdir(self.root)
        return self.root

    def install_static(self, binary: Binary) -> Path:
        """Copy a static binary into ``bin/``, replacing any existing file."""
        self._mkdir(self.bin_dir)
        dst = self.bin_dir / binary.name
        self._copy(binary.path, dst)
        self.stripper.strip(dst)
        with _io(dst, "chmod"):
            os.chmod(dst, EXECUTABLE_MODE)
        logger.debug(f"Installed static binary {dst}")
        return dst

    def install_launcher_once(self) -> Path:
        """
        Copy the launcher into the output root on first use.

        Raises:
            LauncherMissingError: The launcher is not on the search path.
        """
        with self._lock:
            if self._launcher_installed:
                return self.launcher_path

            source = shutil.which(self.config.launcher_name, path=self.config.search_path)
            if source is None:
                raise LauncherMissingError(self.config.launcher_name)

            self.ensure_root()
            self._copy(Path(source), self.launcher_path, mode=EXECUTABLE_MODE)
            self._launcher_installed = True
            logger.info(f"Installed launcher {source} -> {self.launcher_path}")
            return self.launcher_path

    def link_binary(self, binary: Binary) -> Path:
        """Symlink ``bin/<name>`` to the launcher; fails if the path exists."""
        self._mkdir(self.bin_dir)
        link = self.bin_dir / binary.name
        with _io(link, "symlink"):
            os.symlink(self.config.launcher_link_target, link)
        logger.debug(f"Linked {link} -> {self.config.launcher_link_target}")
        return link

    def install_shared_binary(self, binary: Binary) -> Path:
        """Copy a dynamic binary into ``shared/bin/``, replacing any existing file."""
        self._mkdir(self.shared_bin_dir)
        dst = self.shared_bin_dir / binary.name
        self._copy(binary.path, dst)
        self.stripper.strip(dst)
        return dst

    def install_library(self, library: Library) -> bool:
        """
        Copy a library into ``shared/lib/`` unless its base name is taken.

        Returns:
            True if the library was copied, False if it was skipped.
        """
        name = library.base_name
        with self._lock:
            if name in self._copied_libraries:
                logger.debug(f"Skipping {library.source}: {name} already bundled")
                return False

            self._mkdir(self.shared_lib_dir)
            dst = self.shared_lib_dir / name
            if os.path.lexists(dst):
                # Left by an earlier run into the same destination
                self._copied_libraries.add(name)
                logger.debug(f"Skipping {library.source}: {dst} exists")
                return False

            self._copy(library.source, dst)
            self.stripper.strip(dst)
            self._copied_libraries.add(name)
            logger.debug(f"Installed library {library.source} -> {dst}")
            return True
