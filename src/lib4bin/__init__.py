"""
lib4bin - Shared-library closure bundler

Packs Linux executables into a self-contained, relocatable tree:
- Static binaries are copied into bin/
- Dynamic binaries run through the sharun launcher, with their whole
  shared-library closure deduplicated under shared/lib/
"""

from .models import Binary, Library, Linkage, ProcessingResult, BatchReport
from .config import BundleConfig
from .prober import LinkageProber, LddProber, parse_ldd_output
from .classifier import LinkageClassifier
from .resolver import DependencyResolver
from .stripper import Stripper
from .layout import LayoutBuilder
from .processor import BinaryProcessor
from .batch import BatchDriver, run_batch

__all__ = [
    "Binary",
    "Library",
    "Linkage",
    "ProcessingResult",
    "BatchReport",
    "BundleConfig",
    "LinkageProber",
    "LddProber",
    "parse_ldd_output",
    "LinkageClassifier",
    "DependencyResolver",
    "Stripper",
    "LayoutBuilder",
    "BinaryProcessor",
    "BatchDriver",
    "run_batch",
]
