"""Scheduler protocol: the capability contract every backend implements."""

from typing import List, Protocol

from twelvefactor.core.schema.manifest import Manifest
from twelvefactor.core.schema.task import Task


class Scheduler(Protocol):
    """Runs 12factor apps on some container backend.

    Callers talk to this interface only, so one orchestration backend can be
    swapped for another without touching them. Implementations raise on
    failure; errors from the backend are expected to reach the caller as-is.

    Example:
        def deploy(scheduler: Scheduler, manifest: Manifest) -> None:
            scheduler.up(manifest)
            for task in scheduler.tasks(manifest.app_id):
                print(task.id, task.state)
    """

    def up(self, manifest: Manifest) -> None:
        """Converge the app's processes to the manifest."""
        ...

    def remove(self, app_id: str) -> None:
        """Tear down every process of the app."""
        ...

    def scale_process(self, app_id: str, process_name: str, count: int) -> None:
        """Set the desired instance count of one process."""
        ...

    def tasks(self, app_id: str) -> List[Task]:
        """List the app's running instances across all processes."""
        ...

    def restart(self, app_id: str) -> None:
        """Replace the app's running instances without changing desired state."""
        ...
