"""
Linkage classifier - static or dynamic?
"""

from __future__ import annotations

import dataclasses
import logging

from common.exceptions import ProberError

from .models import Binary, Linkage
from .prober import LinkageProber

logger = logging.getLogger(__name__)


class LinkageClassifier:
    """
    Decides whether a binary needs the shared-library treatment.

    A binary whose probe fails (tool missing, unreadable file, non-ELF
    input) is treated as static rather than failing the binary.
    """

    STATIC_MARKERS = (
        "not a dynamic executable",
        "not a valid dynamic program",
        "statically linked",
    )

    def __init__(self, prober: LinkageProber):
        self.prober = prober

    def is_static_report(self, report: str) -> bool:
        lowered = report.lower()
        return any(marker in lowered for marker in self.STATIC_MARKERS)

    def classify(self, binary: Binary) -> Binary:
        """Return ``binary`` with its linkage set."""
        try:
            report = self.prober.report(binary.path)
        except ProberError as e:
            logger.debug(f"Probe failed for {binary.path}, treating as static: {e}")
            return dataclasses.replace(binary, linkage=Linkage.STATIC)

        if self.is_static_report(report):
            linkage = Linkage.STATIC
        else:
            linkage = Linkage.DYNAMIC

        logger.debug(f"{binary.path} is {linkage.value}")
        return dataclasses.replace(binary, linkage=linkage)
