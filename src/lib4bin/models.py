"""
Bundle data model - binaries, libraries and per-binary outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from common.exceptions import Lib4binError


class Linkage(Enum):
    """How an executable is linked."""
    STATIC = "static"
    DYNAMIC = "dynamic"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Binary:
    """An input executable. Reclassify with ``dataclasses.replace``."""
    path: Path
    # Always True once built by stat_binary, which rejects anything else
    is_regular: bool = True
    linkage: Linkage = Linkage.UNKNOWN

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_dynamic(self) -> bool:
        return self.linkage is Linkage.DYNAMIC


@dataclass(frozen=True)
class Library:
    """A shared object from a binary's closure, keyed by base name."""
    source: Path

    @property
    def base_name(self) -> str:
        return self.source.name


@dataclass
class ProcessingResult:
    """Outcome of bundling one input binary."""
    path: str
    success: bool
    linkage: Linkage = Linkage.UNKNOWN
    libraries: List[str] = field(default_factory=list)
    libraries_copied: int = 0
    error: Optional[Lib4binError] = None

    @property
    def name(self) -> str:
        return Path(self.path).name

    @property
    def reason(self) -> str:
        return str(self.error) if self.error else ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "path": self.path,
            "success": self.success,
            "linkage": self.linkage.value,
        }
        if self.linkage is Linkage.DYNAMIC:
            data["libraries"] = list(self.libraries)
            data["libraries_copied"] = self.libraries_copied
        if self.error:
            data["error"] = self.error.to_dict()
        return data


@dataclass
class BatchReport:
    """Aggregated results of one batch run."""
    destination: Path
    results: List[ProcessingResult] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    aborted: bool = False

    @property
    def succeeded(self) -> List[ProcessingResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[ProcessingResult]:
        return [r for r in self.results if not r.success]

    @property
    def ok(self) -> bool:
        return not self.failed and not self.skipped and not self.aborted

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def result_for(self, path: str) -> Optional[ProcessingResult]:
        for result in self.results:
            if result.path == path:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "destination": str(self.destination),
            "aborted": self.aborted,
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "skipped": list(self.skipped),
            "results": [r.to_dict() for r in self.results],
        }
