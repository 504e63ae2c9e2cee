"""
Pytest configuration and shared fixtures for lib4bin tests.

Provides a scriptable linkage prober, a fake launcher on a private search
path, and helpers for creating input binaries and system libraries.
"""

import shutil
import pytest
from pathlib import Path
from typing import Dict, Iterable, List
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from common.exceptions import ProberError  # noqa: E402
from lib4bin.config import BundleConfig  # noqa: E402
from lib4bin.prober import LinkageProber  # noqa: E402


class FakeProber(LinkageProber):
    """In-memory prober; unknown paths fail like ldd on a non-ELF file."""

    def __init__(self):
        self.reports: Dict[str, str] = {}
        self.dependencies: Dict[str, List[str]] = {}
        self.calls: List[str] = []

    def add_static(self, path: Path) -> None:
        self.reports[str(path)] = "\tnot a dynamic executable"

    def add_dynamic(self, path: Path, libraries: Iterable[Path]) -> None:
        libraries = [str(lib) for lib in libraries]
        self.reports[str(path)] = "\n".join(
            f"\t{Path(lib).name} => {lib} (0x00007f0000000000)" for lib in libraries
        )
        self.dependencies[str(path)] = libraries

    def report(self, path) -> str:
        self.calls.append(str(path))
        if str(path) not in self.reports:
            raise ProberError(str(path), "not a valid ELF file")
        return self.reports[str(path)]

    def list_dependencies(self, path) -> List[str]:
        if str(path) not in self.dependencies:
            raise ProberError(str(path), "not a valid ELF file")
        return list(self.dependencies[str(path)])


# ============ Tool Fixtures ============

@pytest.fixture
def fake_prober() -> FakeProber:
    """Provide an empty scriptable prober."""
    return FakeProber()


@pytest.fixture
def launcher_dir(tmp_path: Path) -> Path:
    """Provide a search path containing an executable 'sharun'."""
    tools = tmp_path / "tools"
    tools.mkdir()
    launcher = tools / "sharun"
    launcher.write_bytes(b"#!/bin/sh\necho sharun launcher\n")
    launcher.chmod(0o755)
    return tools


@pytest.fixture
def empty_search_path(tmp_path: Path) -> Path:
    """Provide a search path with no tools in it."""
    empty = tmp_path / "empty-path"
    empty.mkdir()
    return empty


# ============ Layout Fixtures ============

@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def bundle_config(out_dir: Path, launcher_dir: Path) -> BundleConfig:
    """Config writing to a temporary destination, launcher on a private path."""
    return BundleConfig(dst_dir=str(out_dir), search_path=str(launcher_dir))


@pytest.fixture
def make_file(tmp_path: Path):
    """Factory writing a file under tmp_path and returning its path."""
    def _make(relpath: str, content: bytes = b"\x7fELF fake", mode: int = 0o755) -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        path.chmod(mode)
        return path
    return _make


@pytest.fixture
def system_libs(make_file) -> Dict[str, Path]:
    """A minimal glibc-like set of shared objects."""
    return {
        "libc": make_file("sys/lib/libc.so.6", b"libc from sys", mode=0o755),
        "libm": make_file("sys/lib/libm.so.6", b"libm from sys", mode=0o644),
        "libz": make_file("sys/lib/libz.so.1", b"libz from sys", mode=0o644),
        "loader": make_file("sys/lib64/ld-linux-x86-64.so.2", b"loader", mode=0o755),
    }


# ============ Marker Configuration ============

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "unit: fast unit tests with no external deps"
    )
    config.addinivalue_line(
        "markers", "integration: tests that run real system tools"
    )


def pytest_collection_modifyitems(config, items):
    """Skip tests based on environment."""
    skip_linux = pytest.mark.skip(reason="Requires Linux with ldd")

    for item in items:
        if "integration" in item.keywords:
            if not sys.platform.startswith("linux") or shutil.which("ldd") is None:
                item.add_marker(skip_linux)
