"""
Dependency resolver - turns a dynamic binary into its library closure.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from common.exceptions import ProberError, ResolutionError

from .models import Binary, Library, Linkage
from .prober import LinkageProber

logger = logging.getLogger(__name__)


class DependencyResolver:
    """
    Resolves the shared libraries a dynamic binary needs at load time.

    The prober already returns the transitive closure, so no further
    recursion happens here.
    """

    def __init__(self, prober: LinkageProber):
        self.prober = prober

    def resolve(self, binary: Binary) -> List[Library]:
        """
        Return the ordered closure of ``binary``, dynamic loader included.

        Raises:
            ResolutionError: The closure could not be enumerated.
        """
        if binary.linkage is not Linkage.DYNAMIC:
            raise ResolutionError(
                str(binary.path),
                f"binary is classified as {binary.linkage.value}, not dynamic",
            )

        try:
            paths = self.prober.list_dependencies(binary.path)
        except ProberError as e:
            raise ResolutionError(str(binary.path), e.message, cause=e) from e

        if not paths:
            raise ResolutionError(str(binary.path), "no shared objects reported")

        libraries: List[Library] = []
        seen = set()
        for path in paths:
            if path in seen:
                continue
            seen.add(path)
            libraries.append(Library(source=Path(path)))

        logger.debug(f"{binary.name} needs {len(libraries)} shared objects")
        return libraries
