"""
Core module for library configuration, logging, and reliability estimation.
"""
from .config import settings

__all__ = ["settings"]
