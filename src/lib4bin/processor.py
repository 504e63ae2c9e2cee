"""
Binary processor - bundles a single input executable.

Static binaries are copied straight into ``bin/``. Dynamic binaries get the
launcher (once per run), a ``bin/`` symlink to it, a copy under
``shared/bin/`` and their whole library closure under ``shared/lib/``.
"""

from __future__ import annotations

import logging
import stat
from pathlib import Path
from typing import Union

from common.exceptions import (
    InputError,
    InputNotFoundError,
    LauncherMissingError,
    Lib4binError,
    NotARegularFileError,
)
from common.logging_config import LogContext

from .classifier import LinkageClassifier
from .config import BundleConfig
from .layout import LayoutBuilder
from .models import Binary, Linkage, ProcessingResult
from .resolver import DependencyResolver

logger = logging.getLogger(__name__)


class BinaryProcessor:
    """Runs one binary through stat, classify and install."""

    def __init__(
        self,
        config: BundleConfig,
        classifier: LinkageClassifier,
        resolver: DependencyResolver,
        layout: LayoutBuilder,
    ):
        self.config = config
        self.classifier = classifier
        self.resolver = resolver
        self.layout = layout

    def stat_binary(self, path: Union[str, Path]) -> Binary:
        """
        Build a Binary for ``path``.

        Raises:
            InputNotFoundError: Nothing exists at ``path``.
            NotARegularFileError: ``path`` is not a regular file.
            InputError: ``path`` cannot be examined.
        """
        path = Path(path)
        try:
            st = path.stat()
        except FileNotFoundError as e:
            raise InputNotFoundError(str(path), cause=e) from e
        except OSError as e:
            raise InputError(str(path), e.strerror or str(e)) from e

        if not stat.S_ISREG(st.st_mode):
            raise NotARegularFileError(str(path))

        return Binary(path=path, is_regular=True)

    def process(self, path: Union[str, Path]) -> ProcessingResult:
        """
        Bundle ``path`` and report the outcome.

        Per-binary failures are returned as a failed result.

        Raises:
            LauncherMissingError: No launcher is available for a dynamic binary.
        """
        result = ProcessingResult(path=str(path), success=False)

        with LogContext(binary=str(path)):
            try:
                binary = self.stat_binary(path)
                binary = self.classifier.classify(binary)
                result.linkage = binary.linkage
                self.layout.ensure_root()

                if binary.linkage is Linkage.DYNAMIC:
                    self._process_dynamic(binary, result)
                else:
                    self._process_static(binary)

            except LauncherMissingError as e:
                result.error = e
                raise
            except Lib4binError as e:
                result.error = e
                logger.error(f"Error processing {path}: {e}")
                return result

        result.success = True
        return result

    def _process_static(self, binary: Binary) -> None:
        self.layout.install_static(binary)
        logger.debug(f"Processed static binary: {binary.name}")

    def _process_dynamic(self, binary: Binary, result: ProcessingResult) -> None:
        self.layout.install_launcher_once()
        if self.config.create_links:
            self.layout.link_binary(binary)
        self.layout.install_shared_binary(binary)

        libraries = self.resolver.resolve(binary)
        result.libraries = [str(lib.source) for lib in libraries]
        for library in libraries:
            if self.layout.install_library(library):
                result.libraries_copied += 1

        logger.debug(
            f"Processed dynamic binary: {binary.name} "
            f"({result.libraries_copied}/{len(libraries)} libraries copied)"
        )
