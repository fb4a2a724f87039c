"""Shared helpers."""
from .importing import load_target

__all__ = ["load_target"]
