"""
Linkage prober - asks an external tool how an executable is linked.

``LddProber`` shells out to ``ldd``, which already walks the whole
dependency graph, so its listing is the flattened transitive closure. The
dynamic loader appears in that listing as a bare absolute path.
"""

from __future__ import annotations

import logging
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Union

from common.exceptions import ProberError, ResolutionError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class LinkageProber(ABC):
    """Source of linkage information for a binary."""

    @abstractmethod
    def report(self, path: PathLike) -> str:
        """
        Return the human-readable linkage report for ``path``.

        Raises:
            ProberError: The tool could not run or rejected the file.
        """

    @abstractmethod
    def list_dependencies(self, path: PathLike) -> List[str]:
        """
        Return the flattened shared-object closure of ``path``, loader included.

        Raises:
            ProberError: The tool could not run or rejected the file.
            ResolutionError: A needed shared object could not be located.
        """


# "libfoo.so.1 => /usr/lib/libfoo.so.1 (0x...)"
_ARROW_RE = re.compile(r"=>\s*(/.*?)\s*\(")
# "/lib64/ld-linux-x86-64.so.2 (0x...)"
_BARE_RE = re.compile(r"^\s*(/.*?)\s*\(")
# "libfoo.so.1 => not found"
_NOT_FOUND_RE = re.compile(r"^\s*(\S+)\s*=>\s*not found")
# glibc's ldd run as the loader itself reports "... => ldd (0x...)"
_SELF_RE = re.compile(r"^\s*(/.*?)\s*=>\s*ldd\s*\(")


def parse_ldd_output(output: str, path: PathLike = "") -> List[str]:
    """
    Parse ``ldd`` output into an ordered, de-duplicated list of paths.

    Lines without an absolute path (``linux-vdso.so.1``, statically linked
    notices) are ignored.

    Raises:
        ResolutionError: One or more shared objects are reported ``not found``.
    """
    dependencies: List[str] = []
    seen = set()
    missing: List[str] = []

    for line in output.splitlines():
        not_found = _NOT_FOUND_RE.search(line)
        if not_found:
            missing.append(not_found.group(1))
            continue
        if _SELF_RE.search(line):
            continue

        match = _ARROW_RE.search(line) or _BARE_RE.search(line)
        if match and match.group(1) not in seen:
            seen.add(match.group(1))
            dependencies.append(match.group(1))

    if missing:
        raise ResolutionError(
            str(path),
            f"{len(missing)} shared object(s) not found",
            missing=missing,
        )

    return dependencies


class LddProber(LinkageProber):
    """Linkage prober backed by the ``ldd`` command."""

    def __init__(self, tool: str = "ldd"):
        self.tool = tool

    def _run(self, path: PathLike) -> str:
        cmd = [self.tool, str(path)]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise ProberError(str(path), f"cannot run {self.tool}", cause=e) from e

        output = (result.stdout + result.stderr).strip()
        if result.returncode != 0:
            raise ProberError(
                str(path),
                f"{self.tool} exited with status {result.returncode}: {output}",
            )
        return output

    def report(self, path: PathLike) -> str:
        return self._run(path)

    def list_dependencies(self, path: PathLike) -> List[str]:
        return parse_ldd_output(self._run(path), path)
