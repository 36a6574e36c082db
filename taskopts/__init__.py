"""
taskopts

Declare command-line options on task classes with ``@option`` and discover
them with OptionReader, which returns an ordered catalog of descriptors with
lazily inferred value domains.
"""

__version__ = "0.1.0"

from .core import BaseTask, TaskError, TaskRegistry, TaskResult, TaskStatus
from .options import OptionDescriptor, OptionError, OptionMarker, OptionReader
from .decorators import option, task

__all__ = [
    "BaseTask",
    "TaskError",
    "TaskRegistry",
    "TaskResult",
    "TaskStatus",
    "OptionDescriptor",
    "OptionError",
    "OptionMarker",
    "OptionReader",
    "option",
    "task",
]
