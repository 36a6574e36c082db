"""
Archive Task

Plans packing a source directory into an archive file next to it. The task
lists the files that would go into the archive; it does not write one.
"""

from enum import Enum
from pathlib import Path

from ..core import BaseTask, TaskResult, TaskStatus
from ..decorators import option


class Compression(Enum):
    """Archive formats and the file suffix each one produces."""

    ZIP = "zip"
    GZTAR = "gztar"
    BZTAR = "bztar"
    XZTAR = "xztar"

    @property
    def suffix(self) -> str:
        return {"zip": ".zip", "gztar": ".tar.gz", "bztar": ".tar.bz2", "xztar": ".tar.xz"}[
            self.value
        ]


class ArchiveTask(BaseTask):
    """Pack a directory into an archive."""

    def __init__(self, name: str = None, description: str = ""):
        super().__init__(name=name, description=description)
        self.source = Path(".")
        self.compression = Compression.ZIP
        self.include_hidden = False

    @option("source", description="Directory to archive")
    def set_source(self, source: str):
        self.source = Path(source)

    @option("compression", description="Archive format")
    def set_compression(self, compression: Compression):
        self.compression = compression

    @option("include-hidden", description="Also pack files whose name starts with a dot")
    def set_include_hidden(self, include_hidden: bool):
        self.include_hidden = include_hidden

    def execute(self) -> TaskResult:
        source = self.source.resolve()
        if not source.is_dir():
            return TaskResult(
                status=TaskStatus.FAILED,
                message=f"Source directory not found: {source}",
            )

        files = sorted(
            path.relative_to(source).as_posix()
            for path in source.rglob("*")
            if path.is_file()
            and (
                self.include_hidden
                or not any(part.startswith(".") for part in path.relative_to(source).parts)
            )
        )
        archive = source.parent / f"{source.name}{self.compression.suffix}"

        return TaskResult(
            status=TaskStatus.SUCCESS,
            data={"archive": str(archive), "format": self.compression.value, "files": files},
            message=f"Would archive {len(files)} files from {source}",
        )
