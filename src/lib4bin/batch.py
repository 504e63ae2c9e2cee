"""
Batch driver - bundles a list of binaries into one output tree.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from common.decorators import timed
from common.exceptions import LauncherMissingError

from .classifier import LinkageClassifier
from .config import BundleConfig
from .layout import LayoutBuilder
from .models import BatchReport, Linkage, ProcessingResult
from .processor import BinaryProcessor
from .prober import LddProber, LinkageProber
from .resolver import DependencyResolver

logger = logging.getLogger(__name__)


class BatchDriver:
    """
    Processes input binaries in order, one at a time.

    A failing binary never stops the batch, except when the launcher is
    missing: no dynamic binary can be bundled without it.
    """

    def __init__(
        self,
        config: BundleConfig,
        prober: Optional[LinkageProber] = None,
        layout: Optional[LayoutBuilder] = None,
    ):
        self.config = config
        self.prober = prober or LddProber(config.prober_tool)
        self.layout = layout or LayoutBuilder(config)
        self.processor = BinaryProcessor(
            config,
            LinkageClassifier(self.prober),
            DependencyResolver(self.prober),
            self.layout,
        )

    @timed
    def run(self, paths: Iterable[Union[str, Path]]) -> BatchReport:
        report = BatchReport(destination=self.config.destination)
        pending = [str(p) for p in paths]

        for index, path in enumerate(pending):
            try:
                result = self.processor.process(path)
            except LauncherMissingError as e:
                logger.error(f"Error processing {path}: {e}")
                report.results.append(
                    ProcessingResult(path=path, success=False, linkage=Linkage.DYNAMIC, error=e)
                )
                report.skipped = pending[index + 1:]
                report.aborted = True
                if report.skipped:
                    logger.error(
                        f"Aborting: {len(report.skipped)} remaining binaries not processed"
                    )
                break
            report.results.append(result)

        logger.debug(
            f"Batch finished: {len(report.succeeded)} ok, {len(report.failed)} failed"
        )
        return report


def run_batch(
    paths: Iterable[Union[str, Path]],
    config: Optional[BundleConfig] = None,
    prober: Optional[LinkageProber] = None,
) -> BatchReport:
    """Bundle ``paths`` with a fresh layout builder and return the report."""
    driver = BatchDriver(config or BundleConfig(), prober=prober)
    return driver.run(paths)
