"""Core functionality for dotlink."""

from .backup import BackupStore
from .config import Config
from .platform import Platform, get_platform
from .reconcile import Reconciler, RunReport
from .state import LinkState
from .units import ConfigUnit

__all__ = [
    "BackupStore",
    "Config",
    "ConfigUnit",
    "LinkState",
    "Platform",
    "Reconciler",
    "RunReport",
    "get_platform",
]
