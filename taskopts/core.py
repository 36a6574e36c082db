"""
Core task building blocks

This module provides the fundamental pieces that option discovery works against:
- BaseTask: Abstract base class for all tasks
- TaskRegistry: Central registry for task discovery and lookup
- TaskError: Base exception for the package
"""

import abc
import importlib
import inspect
import logging
import pkgutil
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

logger = logging.getLogger(__name__)


class TaskStatus(Enum):
    """Enumeration of possible task execution states."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class TaskError(Exception):
    """Base exception for task and option related errors."""

    def __init__(self, message: str, task_name: str = None, cause: Exception = None):
        self.task_name = task_name
        self.cause = cause
        super().__init__(message)


@dataclass
class TaskResult:
    """Encapsulates the result of a task execution."""

    status: TaskStatus
    data: Any = None
    message: str = ""
    error: Optional[Exception] = None
    execution_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        """Check if the task completed successfully."""
        return self.status == TaskStatus.SUCCESS

    @property
    def failed(self) -> bool:
        """Check if the task failed."""
        return self.status == TaskStatus.FAILED


def default_task_name(task_class: type) -> str:
    return task_class.__name__.lower().replace("task", "")


class BaseTask(abc.ABC):
    """
    Abstract base class for all tasks.

    Concrete tasks expose their command-line options by marking setter methods
    with the ``@option`` decorator. Values are applied by the caller before
    ``run()`` is invoked; the task itself only executes.
    """

    def __init__(self, name: str = None, description: str = ""):
        self.name = name or default_task_name(self.__class__)
        self.description = (
            description or inspect.getdoc(self.__class__) or "No description provided"
        )
        self.logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )

    @abc.abstractmethod
    def execute(self) -> TaskResult:
        """
        Execute the task with its current option values.

        Returns:
            TaskResult: The result of the task execution
        """

    def pre_execute(self):
        """Hook called before task execution."""
        self.logger.info(f"Starting task: {self.name}")

    def post_execute(self, result: TaskResult) -> TaskResult:
        """Hook called after task execution; may replace the result."""
        status_msg = "completed successfully" if result.success else "failed"
        self.logger.info(f"Task {self.name} {status_msg}")
        return result

    def run(self) -> TaskResult:
        """
        Full task execution pipeline with lifecycle hooks.

        Errors raised by the hooks or by ``execute()`` are captured in a
        failed TaskResult instead of propagating.
        """
        start_time = time.time()

        try:
            self.pre_execute()
            result = self.execute()
            result = self.post_execute(result)
        except Exception as e:
            self.logger.error(f"Task {self.name} failed: {e}")
            result = TaskResult(status=TaskStatus.FAILED, error=e, message=str(e))

        result.execution_time = time.time() - start_time
        return result

    def __str__(self) -> str:
        return f"Task({self.name}): {self.description}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}')>"


class TaskRegistry:
    """
    Central registry for task discovery, registration, and lookup.

    The registry state lives on the class, so every instance sees the same
    set of tasks.
    """

    _tasks: Dict[str, Type[BaseTask]] = {}

    @classmethod
    def register(cls, task_class: Type[BaseTask], name: str = None) -> Type[BaseTask]:
        """
        Register a task class in the registry.

        Args:
            task_class: The task class to register
            name: Optional custom name for the task

        Returns:
            The registered task class (for use as decorator)
        """
        if not (inspect.isclass(task_class) and issubclass(task_class, BaseTask)):
            raise TaskError(f"Task class {task_class!r} must extend BaseTask")

        task_name = name or default_task_name(task_class)
        cls._tasks[task_name] = task_class

        logger.info(f"Registered task: {task_name} -> {task_class.__name__}")
        return task_class

    @classmethod
    def get_task(cls, name: str) -> Optional[Type[BaseTask]]:
        """Get a task class by name."""
        return cls._tasks.get(name)

    @classmethod
    def list_tasks(cls) -> List[str]:
        """Get a sorted list of all registered task names."""
        return sorted(cls._tasks)

    @classmethod
    def create_task(cls, name: str, **kwargs) -> BaseTask:
        """
        Create an instance of a registered task.

        Raises:
            TaskError: If the task is not found
        """
        task_class = cls.get_task(name)
        if task_class is None:
            raise TaskError(
                f"Task '{name}' not found. Available tasks: {', '.join(cls.list_tasks())}",
                task_name=name,
            )

        return task_class(name=name, **kwargs)

    @classmethod
    def discover_tasks(cls, module_path: str):
        """
        Import every module of a package and register the concrete
        BaseTask subclasses defined in it.

        Args:
            module_path: Dotted path of the package to search for tasks
        """
        try:
            tasks_module = importlib.import_module(module_path)
        except (ImportError, ValueError, TypeError) as e:
            logger.warning(f"Could not import tasks package {module_path}: {e}")
            return

        for _, modname, _ in pkgutil.iter_modules(getattr(tasks_module, "__path__", [])):
            full_module_name = f"{module_path}.{modname}"

            try:
                module = importlib.import_module(full_module_name)
            except ImportError as e:
                logger.warning(f"Could not import task module {full_module_name}: {e}")
                continue

            for _, obj in inspect.getmembers(module, inspect.isclass):
                if (
                    issubclass(obj, BaseTask)
                    and obj.__module__ == full_module_name
                    and not inspect.isabstract(obj)
                    and obj not in cls._tasks.values()
                ):
                    cls.register(obj, vars(obj).get("task_name"))

    @classmethod
    def clear(cls):
        """Clear all registered tasks (mainly for testing)."""
        cls._tasks.clear()

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Tuple[str, Type[BaseTask]]]:
        return iter(sorted(self._tasks.items()))
