"""
Loaders Package

Contains dataset loading strategies for different sources.
"""

from typing import List

from core.base import BaseLoader, Dataset
from .array_loader import ArrayLoader, SUPPORTED_EXTENSIONS
from .synthetic_loader import SyntheticLoader, DEMOS, DEMO_PREFIX

LOADERS: List[BaseLoader] = [SyntheticLoader(), ArrayLoader()]


def load_dataset(source: str) -> Dataset:
    """
    Load a dataset with the first loader that accepts the source.

    Raises:
        ValueError: If no loader handles the source
    """
    for loader in LOADERS:
        if loader.can_load(source):
            return loader.load(source)
    raise ValueError(f"No loader for '{source}'")


__all__ = [
    'ArrayLoader',
    'SyntheticLoader',
    'SUPPORTED_EXTENSIONS',
    'DEMOS',
    'DEMO_PREFIX',
    'LOADERS',
    'load_dataset',
]
