"""Shared helpers for devserve core modules."""

from .io import read_yaml
from .merge import deep_merge, merge_arrays

__all__ = ["deep_merge", "merge_arrays", "read_yaml"]
