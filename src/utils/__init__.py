"""
lib4bin Utility Modules

Atomic file operations used when populating the output tree.
"""

from .atomic_write import (
    atomic_copy_file,
    atomic_write_text,
    atomic_write_json,
)

__all__ = [
    "atomic_copy_file",
    "atomic_write_text",
    "atomic_write_json",
]
