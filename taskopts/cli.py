"""
Click-based CLI for inspecting tasks and their command-line options.

The CLI only describes options; it does not run tasks or bind values.
"""
import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Type

import click

from taskopts.config import Config
from taskopts.core import BaseTask, TaskError, TaskRegistry
from taskopts.options import OptionReader
from taskopts.report import format_csv, format_json, format_text

logger = logging.getLogger(__name__)

FORMATS = ('text', 'json', 'csv')


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Attributes:
        verbose: Enable debug logging output
        config: Loaded configuration
        _discovered: Whether the configured task packages were imported yet
    """
    verbose: bool = False
    config: Config = field(default_factory=Config)
    _discovered: bool = field(default=False, repr=False, init=False)

    def discover_tasks(self):
        """Import every package listed under tasks.discovery_paths (once)."""
        if self._discovered:
            return
        paths = self.config.get('tasks.discovery_paths') or []
        if isinstance(paths, str):
            # TASKOPTS_TASKS__DISCOVERY_PATHS=a.tasks,b.tasks
            paths = [p.strip() for p in paths.split(',') if p.strip()]
        for module_path in paths:
            TaskRegistry.discover_tasks(module_path)
        logger.debug("Discovered %d tasks", len(TaskRegistry()))
        self._discovered = True

    def resolve_task(self, spec: str) -> Type[BaseTask]:
        """
        Resolve a registered task name or a 'module:ClassName' path.

        Raises:
            TaskError: If the task cannot be found
        """
        if ':' in spec:
            module_name, _, class_name = spec.partition(':')
            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                raise TaskError(f"Cannot import module '{module_name}': {e}", cause=e)
            task_class = getattr(module, class_name, None)
            if not isinstance(task_class, type):
                raise TaskError(f"Module '{module_name}' has no class '{class_name}'")
            return task_class

        self.discover_tasks()
        task_class = TaskRegistry.get_task(spec)
        if task_class is None:
            raise TaskError(
                f"Task '{spec}' not found. Available tasks: {', '.join(TaskRegistry.list_tasks())}",
                task_name=spec,
            )
        return task_class


def configure_logging(config: Config, verbose: bool):
    level = 'DEBUG' if verbose else str(config.get('logging.level', 'WARNING')).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise click.ClickException(f"Unknown logging.level '{level}'")
    logging.basicConfig(level=level, format=config.get('logging.format'))
    logging.getLogger().setLevel(level)


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option(
    '--config-dir',
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory holding config files (default: ./config)'
)
@click.pass_context
def cli(ctx, verbose, config_dir):
    """
    taskopts - inspect tasks and the command-line options they expose.
    """
    try:
        config = Config(config_dir).load()
    except TaskError as e:
        raise click.ClickException(str(e))

    configure_logging(config, verbose)
    ctx.obj = CLIContext(verbose=verbose, config=config)


@cli.command()
@click.pass_obj
def tasks(obj: CLIContext):
    """List registered tasks."""
    obj.discover_tasks()
    names = TaskRegistry.list_tasks()
    if not names:
        click.echo('No tasks found.')
        return

    width = max(len(n) for n in names)
    for name, task_class in TaskRegistry():
        summary = (task_class.__doc__ or '').strip().splitlines()
        click.echo(f"{name.ljust(width)}  {summary[0] if summary else ''}".rstrip())


@cli.command()
@click.argument('task')
@click.option(
    '--format', 'output_format',
    type=click.Choice(FORMATS),
    default=None,
    help='Output format (default: output.format from config)'
)
@click.pass_obj
def options(obj: CLIContext, task: str, output_format: Optional[str]):
    """Show the command-line options of TASK (a task name or module:Class)."""
    output_format = output_format or obj.config.get('output.format', 'text')
    if output_format not in FORMATS:
        raise click.BadParameter(
            f"unsupported format '{output_format}'", param_hint='output.format'
        )

    try:
        task_class = obj.resolve_task(task)
    except TaskError as e:
        raise click.ClickException(str(e))

    catalog = OptionReader().get_options(task_class)

    if output_format == 'json':
        click.echo(format_json(catalog))
    elif output_format == 'csv':
        click.echo(format_csv(catalog), nl=False)
    else:
        click.echo(format_text(catalog, task_name=task))


def main():
    """Console script entry point."""
    cli()


if __name__ == '__main__':
    main()
