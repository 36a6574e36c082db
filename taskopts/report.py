"""
Module for rendering option catalogs as help text, JSON or tables.
"""
import json
import logging
import typing
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from taskopts.options import UNION_TYPES, OptionDescriptor

logger = logging.getLogger(__name__)

COLUMNS = ['name', 'aliases', 'description', 'type', 'values', 'declared_by']


def type_name(value_type: Any) -> str:
    """Readable name of an option's value type ('' when unresolved)."""
    if value_type is None:
        return ''
    if isinstance(value_type, type):
        return value_type.__name__
    args = typing.get_args(value_type)
    if typing.get_origin(value_type) in UNION_TYPES and type(None) in args:
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1:
            return f"Optional[{type_name(rest[0])}]"
    return str(value_type).replace('typing.', '')


def describe_options(options: Sequence[OptionDescriptor]) -> List[Dict[str, Any]]:
    """
    Turn descriptors into plain records.

    Reading the records resolves each descriptor's value domain.
    """
    records = []
    for descriptor in options:
        owner = descriptor.declaring_class
        records.append({
            'name': descriptor.name,
            'aliases': descriptor.aliases,
            'description': descriptor.description,
            'type': type_name(descriptor.available_values_type),
            'values': list(descriptor.available_values),
            'declared_by': owner.__qualname__ if owner else '',
        })
    return records


def _flag(names: Sequence[str]) -> str:
    return ', '.join(('-' if len(n) == 1 else '--') + n for n in names)


def format_text(options: Sequence[OptionDescriptor], task_name: Optional[str] = None) -> str:
    """
    Render a help listing of the options.

    Example:
        Options for task 'deploy':
          --env        Target environment
          --force, -f  Skip the confirmation prompt
                       Available values are: true, false
    """
    lines = []
    if task_name:
        lines.append(f"Options for task '{task_name}':")

    if not options:
        lines.append('No options.')
        return '\n'.join(lines)

    flags = [_flag(d.names) for d in options]
    width = max(len(f) for f in flags)

    for flag, descriptor in zip(flags, options):
        lines.append(f"  {flag.ljust(width)}  {descriptor.description}".rstrip())
        if descriptor.available_values:
            values = ', '.join(descriptor.available_values)
            lines.append(f"  {' ' * width}  Available values are: {values}")

    return '\n'.join(lines)


def format_json(options: Sequence[OptionDescriptor]) -> str:
    """Render the options as a JSON array of records."""
    return json.dumps(describe_options(options), indent=2)


def options_dataframe(options: Sequence[OptionDescriptor]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per option.

    List-valued columns (aliases, values) are joined with ', '.
    """
    rows = []
    for record in describe_options(options):
        record['aliases'] = ', '.join(record['aliases'])
        record['values'] = ', '.join(record['values'])
        rows.append(record)

    return pd.DataFrame(rows, columns=COLUMNS)


def format_csv(options: Sequence[OptionDescriptor]) -> str:
    """Render the options as CSV text."""
    df = options_dataframe(options)
    logger.debug("Rendering %d options as CSV", len(df))
    return df.to_csv(index=False)
