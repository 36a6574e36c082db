"""
Deploy Task

Plans a deployment of the current project to a named environment. The task
records what it would do; it never talks to the remote host itself.
"""

from typing import Optional

from ..core import BaseTask, TaskResult, TaskStatus
from ..decorators import option


class RemoteTask(BaseTask):
    """Base for tasks that act on a remote host."""

    def __init__(self, name: str = None, description: str = ""):
        super().__init__(name=name, description=description)
        self.verbose = False
        self._host: Optional[str] = None

    @option("verbose", description="Log every step of the task")
    def set_verbose(self, verbose: bool):
        self.verbose = verbose

    @property
    def host(self) -> Optional[str]:
        return self._host

    @option("host", description="Host name of the target machine")
    @host.setter
    def host(self, host: str):
        self._host = host


class DeployTask(RemoteTask):
    """Deploy the project to an environment."""

    task_name = "deploy"

    def __init__(self, name: str = None, description: str = ""):
        super().__init__(name=name, description=description)
        self.force = False
        self.env = "staging"

    @option("force", "f", description="Skip the confirmation prompt")
    def set_force(self, force: bool):
        self.force = force

    @option("env", description="Target environment")
    def set_env(self, env: str):
        self.env = env

    def execute(self) -> TaskResult:
        if self.env == "production" and not self.force:
            return TaskResult(
                status=TaskStatus.SKIPPED,
                message="Refusing to deploy to production without --force",
            )

        steps = [f"upload build to {self.host or 'localhost'}", f"switch {self.env} to new build"]
        if self.verbose:
            for step in steps:
                self.logger.info(f"Planned step: {step}")

        return TaskResult(
            status=TaskStatus.SUCCESS,
            data={"env": self.env, "host": self.host, "steps": steps},
            message=f"Deployment to {self.env} planned",
        )
