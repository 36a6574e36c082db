"""
Test cases for rendering option catalogs.
"""
import json

from taskopts.options import OptionReader
from taskopts.report import (
    COLUMNS,
    describe_options,
    format_csv,
    format_json,
    format_text,
    options_dataframe,
    type_name,
)
from taskopts.tasks.archive_task import ArchiveTask
from taskopts.tasks.deploy_task import DeployTask


def deploy_options():
    return OptionReader().get_options(DeployTask)


class TestDescribeOptions:
    """Test conversion of descriptors to records."""

    def test_records(self):
        """Test the record of each deploy option."""
        records = {r["name"]: r for r in describe_options(deploy_options())}

        assert list(records) == ["env", "force", "host", "verbose"]
        assert records["force"] == {
            "name": "force",
            "aliases": ["f"],
            "description": "Skip the confirmation prompt",
            "type": "bool",
            "values": ["true", "false"],
            "declared_by": "DeployTask",
        }
        assert records["host"]["declared_by"] == "RemoteTask"
        assert records["env"]["values"] == []

    def test_enum_type_name(self):
        """Test that enum options report the enum class name."""
        records = {r["name"]: r for r in describe_options(OptionReader().get_options(ArchiveTask))}
        assert records["compression"]["type"] == "Compression"
        assert records["compression"]["values"] == []

    def test_type_name(self):
        """Test readable names for unresolved and generic types."""
        from typing import Optional

        assert type_name(None) == ""
        assert type_name(str) == "str"
        assert type_name(Optional[bool]) == "Optional[bool]"


class TestFormatText:
    """Test the help listing."""

    def test_listing(self):
        """Test flags, descriptions and boolean values."""
        text = format_text(deploy_options(), task_name="deploy")
        lines = text.splitlines()

        assert lines[0] == "Options for task 'deploy':"
        assert lines[1].split() == ["--env", "Target", "environment"]
        assert lines[2].startswith("  --force, -f  Skip the confirmation prompt")
        assert lines[3].strip() == "Available values are: true, false"
        assert text.count("Available values are: true, false") == 2

    def test_empty_catalog(self):
        """Test the listing for a task without options."""
        assert format_text([], task_name="noop") == "Options for task 'noop':\nNo options."
        assert format_text([]) == "No options."


class TestTabularFormats:
    """Test JSON, DataFrame and CSV output."""

    def test_json(self):
        """Test that JSON output is a parseable array of records."""
        data = json.loads(format_json(deploy_options()))
        assert [r["name"] for r in data] == ["env", "force", "host", "verbose"]
        assert data[1]["aliases"] == ["f"]

    def test_dataframe(self):
        """Test DataFrame columns and joined list values."""
        df = options_dataframe(deploy_options())

        assert list(df.columns) == COLUMNS
        assert len(df) == 4
        force = df[df["name"] == "force"].iloc[0]
        assert force["values"] == "true, false"
        assert force["aliases"] == "f"

    def test_empty_dataframe(self):
        """Test that an empty catalog keeps the column layout."""
        df = options_dataframe([])
        assert list(df.columns) == COLUMNS
        assert df.empty

    def test_csv(self):
        """Test CSV header and a quoted value list."""
        lines = format_csv(deploy_options()).splitlines()

        assert lines[0] == "name,aliases,description,type,values,declared_by"
        assert lines[2] == 'force,f,Skip the confirmation prompt,bool,"true, false",DeployTask'
