"""
Decorators for declaring tasks and their command-line options

These decorators only attach metadata. ``@option`` marks a setter method so
that OptionReader can find it, and ``@task`` registers a task class under a
name.
"""

from typing import Callable, Type

from .core import BaseTask, TaskRegistry
from .options import MARKER_ATTRIBUTE, OptionError, OptionMarker, get_option_marker


def option(*names: str, description: str = ""):
    """
    Mark a method as a command-line option.

    The first name is the primary one; it is used for ordering and lookup.
    Further names are aliases.

    Args:
        *names: Option names without leading dashes
        description: Human-readable help text

    Example:
        class DeployTask(BaseTask):
            @option("force", "f", description="Skip the confirmation prompt")
            def set_force(self, force: bool):
                self.force = force

    Raises:
        OptionError: If no names are given, a name is not a non-empty string,
            or the method is already marked
    """
    marker = OptionMarker(options=tuple(names), description=description)

    def decorator(func: Callable) -> Callable:
        target = func.fset if isinstance(func, property) else func
        target = getattr(target, "__func__", target)

        if not callable(target):
            raise OptionError(f"@option can only mark methods, got {func!r}")
        if get_option_marker(target) is not None:
            raise OptionError(
                f"{getattr(target, '__qualname__', repr(target))} already carries an option marker"
            )

        setattr(target, MARKER_ATTRIBUTE, marker)
        return func

    return decorator


def task(name: str = None):
    """
    Register a task class with the TaskRegistry.

    Args:
        name: Optional custom name; defaults to the class name without "task"

    Example:
        @task(name="deploy")
        class DeployTask(RemoteTask):
            ...
    """

    def decorator(task_class: Type[BaseTask]) -> Type[BaseTask]:
        registered_class = TaskRegistry.register(task_class, name)
        if name:
            registered_class.task_name = name
        return registered_class

    return decorator
