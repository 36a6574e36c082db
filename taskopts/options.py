"""
Command-line option discovery for tasks

This module reads the ``@option`` markers placed on task methods and turns them
into an ordered catalog of OptionDescriptor objects:
- OptionMarker: The declarative metadata attached to one method
- OptionDescriptor: One discovered option with its lazily inferred value domain
- OptionReader: Walks a task class hierarchy and assembles the sorted catalog

The reader only describes options. Binding command-line text to the marked
methods is left to the caller.
"""

import inspect
import logging
import types
import typing
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from .core import TaskError

logger = logging.getLogger(__name__)

MARKER_ATTRIBUTE = "__task_option__"

BOOLEAN_VALUES = ("true", "false")

UNION_TYPES = (typing.Union, types.UnionType)


class OptionError(TaskError):
    """Raised when an option marker is declared incorrectly."""


@dataclass(frozen=True)
class OptionMarker:
    """Declarative metadata naming a method as a command-line option."""

    options: Tuple[str, ...]
    description: str = ""

    def __post_init__(self):
        if not self.options:
            raise OptionError("An option needs at least one name")
        for name in self.options:
            if not isinstance(name, str) or not name:
                raise OptionError(f"Invalid option name: {name!r}")

    @property
    def primary_name(self) -> str:
        return self.options[0]


def get_option_marker(func: Any) -> Optional[OptionMarker]:
    """Return the OptionMarker attached to ``func``, or None."""
    marker = getattr(func, MARKER_ATTRIBUTE, None)
    return marker if isinstance(marker, OptionMarker) else None


def _unwrap(attribute: Any) -> Tuple[Optional[Callable], bool]:
    """
    Resolve a class ``__dict__`` entry to the function that may carry a marker.

    Returns the function and whether it takes a receiver (self/cls) as its
    first parameter.
    """
    if isinstance(attribute, staticmethod):
        return attribute.__func__, False
    if isinstance(attribute, classmethod):
        return attribute.__func__, True
    if isinstance(attribute, property):
        return attribute.fset, True
    if inspect.isfunction(attribute):
        return attribute, True
    return None, False


def is_boolean_type(annotation: Any) -> bool:
    """True for ``bool`` and its optional forms (``Optional[bool]``, ``bool | None``)."""
    if annotation is bool:
        return True
    if typing.get_origin(annotation) in UNION_TYPES:
        return set(typing.get_args(annotation)) == {bool, type(None)}
    return False


class OptionDescriptor:
    """
    One discovered option: the marker plus the method it is attached to.

    ``available_values`` and ``available_values_type`` are worked out from
    the method signature on first access and then kept for the lifetime of
    the descriptor. First access is not synchronised.
    """

    def __init__(
        self,
        option: OptionMarker,
        annotated_method: Callable,
        declaring_class: type = None,
        has_receiver: bool = True,
    ):
        self._option = option
        self._annotated_method = annotated_method
        self._declaring_class = declaring_class
        self._has_receiver = has_receiver
        self._available_values: Optional[List[str]] = None
        self._available_values_type: Any = None
        self._resolved = False

    @property
    def option(self) -> OptionMarker:
        return self._option

    @property
    def annotated_method(self) -> Callable:
        return self._annotated_method

    @property
    def declaring_class(self) -> Optional[type]:
        return self._declaring_class

    @property
    def name(self) -> str:
        """The primary option name."""
        return self._option.primary_name

    @property
    def names(self) -> List[str]:
        return list(self._option.options)

    @property
    def aliases(self) -> List[str]:
        return list(self._option.options[1:])

    @property
    def description(self) -> str:
        return self._option.description

    @property
    def available_values(self) -> List[str]:
        # calculated lazily to avoid the signature inspection upfront
        if not self._resolved:
            self._resolve_available_values()
        return self._available_values

    @property
    def available_values_type(self) -> Any:
        """The parameter type of the option, or None when it cannot be resolved."""
        if not self._resolved:
            self._resolve_available_values()
        return self._available_values_type

    def _parameters(self) -> List[inspect.Parameter]:
        signature = inspect.signature(self._annotated_method, eval_str=True)
        parameters = list(signature.parameters.values())
        if self._has_receiver and parameters:
            parameters = parameters[1:]
        return parameters

    def _resolve_available_values(self):
        parameters = self._parameters()
        self._available_values = []

        if len(parameters) == 1 and parameters[0].kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            annotation = parameters[0].annotation
            value_type = None if annotation is inspect.Parameter.empty else annotation
            self._available_values_type = value_type

            if is_boolean_type(value_type):
                self._available_values.extend(BOOLEAN_VALUES)
        else:
            # TODO: model options whose setter takes several parameters
            logger.debug(
                "Option '%s' takes %d parameters; value domain left unresolved",
                self.name,
                len(parameters),
            )

        self._resolved = True

    def __lt__(self, other: "OptionDescriptor") -> bool:
        if not isinstance(other, OptionDescriptor):
            return NotImplemented
        return self.name < other.name

    def __repr__(self) -> str:
        owner = self._declaring_class.__name__ if self._declaring_class else "?"
        return f"<OptionDescriptor(name='{self.name}', method='{owner}.{self._annotated_method.__name__}')>"


class OptionReader:
    """
    Builds option catalogs for task classes.

    Catalogs are rebuilt on every call; nothing is cached between queries.
    """

    def get_options(self, task: Any) -> List[OptionDescriptor]:
        """
        Discover the command-line options of a task class or task instance.

        Args:
            task: A class, an instance (its runtime class is inspected) or None

        Returns:
            Descriptors sorted by primary option name
        """
        if task is None:
            return []

        task_class = task if inspect.isclass(task) else type(task)
        options = []

        for owner in task_class.__mro__:
            if owner is object:
                break
            for attribute in vars(owner).values():
                func, has_receiver = _unwrap(attribute)
                if func is None:
                    continue
                marker = get_option_marker(func)
                if marker is not None:
                    logger.debug(
                        "Found option '%s' on %s.%s",
                        marker.primary_name,
                        owner.__qualname__,
                        func.__name__,
                    )
                    options.append(
                        OptionDescriptor(marker, func, owner, has_receiver=has_receiver)
                    )

        return sorted(options)

    def find_option(self, task: Any, name: str) -> Optional[OptionDescriptor]:
        """
        Look up an option by its primary name or one of its aliases.

        A primary name match takes precedence over an alias match.
        """
        options = self.get_options(task)
        for descriptor in options:
            if descriptor.name == name:
                return descriptor
        for descriptor in options:
            if name in descriptor.aliases:
                return descriptor
        return None
