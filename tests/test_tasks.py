"""
Test cases for the bundled tasks.
"""
from taskopts.core import TaskStatus
from taskopts.options import OptionReader
from taskopts.tasks.archive_task import ArchiveTask, Compression
from taskopts.tasks.deploy_task import DeployTask


class TestDeployTask:
    """Test the deploy task."""

    def test_option_catalog(self):
        """Test the options contributed by the task and its base."""
        options = OptionReader().get_options(DeployTask)
        assert [d.name for d in options] == ["env", "force", "host", "verbose"]

    def test_plans_deployment(self):
        """Test a staging deployment using values set through the options."""
        deploy = DeployTask()
        reader = OptionReader()
        reader.find_option(deploy, "env").annotated_method(deploy, "staging")
        deploy.host = "web-1"

        result = deploy.run()

        assert result.success
        assert result.data["host"] == "web-1"
        assert result.data["steps"][0] == "upload build to web-1"

    def test_production_needs_force(self):
        """Test that production deploys are skipped without force."""
        deploy = DeployTask()
        deploy.set_env("production")
        assert deploy.run().status == TaskStatus.SKIPPED

        deploy.set_force(True)
        assert deploy.run().success


class TestArchiveTask:
    """Test the archive task."""

    def test_plans_zip(self, tmp_path):
        """Test the plan for a zip archive, skipping hidden files."""
        source = tmp_path / "site"
        (source / "css").mkdir(parents=True)
        (source / "index.html").write_text("<h1>hi</h1>")
        (source / "css" / "main.css").write_text("body {}")
        (source / ".env").write_text("SECRET=1")

        archive = ArchiveTask()
        archive.set_source(str(source))
        result = archive.run()

        assert result.success
        assert result.data["files"] == ["css/main.css", "index.html"]
        assert result.data["archive"] == str(tmp_path.resolve() / "site.zip")
        assert not (tmp_path / "site.zip").exists()

    def test_include_hidden_and_compression(self, tmp_path):
        """Test the include-hidden option and the archive suffix."""
        (tmp_path / ".env").write_text("SECRET=1")
        archive = ArchiveTask()
        archive.set_source(str(tmp_path))
        archive.set_compression(Compression.GZTAR)
        archive.set_include_hidden(True)

        result = archive.run()

        assert result.data["files"] == [".env"]
        assert result.data["format"] == "gztar"
        assert result.data["archive"].endswith(f"{tmp_path.name}.tar.gz")

    def test_missing_source(self, tmp_path):
        """Test the failure for a missing directory."""
        archive = ArchiveTask()
        archive.set_source(str(tmp_path / "missing"))

        result = archive.run()

        assert result.failed
        assert "Source directory not found" in result.message
