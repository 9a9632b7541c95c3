"""ECS implementation of the Scheduler protocol.

ECSScheduler is a stateless adapter. Convergence, removal and restarts are
delegated to a StackBuilder; scaling and task inspection go straight to the
cluster through a ClusterClient. The process -> service mapping is fetched
from the StackBuilder on every call and never cached, so each operation acts
on the latest converged state.

Nothing here retries or translates errors. Whatever the collaborators raise
reaches the caller unchanged, and any failure aborts the whole operation.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional

from twelvefactor.core.config import get_config_value, get_int_config_value
from twelvefactor.core.errors import MissingTaskDescriptionError, ProcessNotFoundError
from twelvefactor.core.schema.manifest import Manifest
from twelvefactor.core.schema.task import Task
from twelvefactor.ecs.client import ClusterClient, ECSClusterClient
from twelvefactor.ecs.constants import DEFAULT_CLUSTER, DEFAULT_MAX_WORKERS
from twelvefactor.ecs.stack import StackBuilder
from twelvefactor.ecs.utils import task_id_from_arn

logger = logging.getLogger(__name__)


class ECSScheduler:
    """Scheduler that runs apps as ECS services in one cluster.

    Safe to share between threads: the only state is the cluster name and
    the injected collaborators, none of which change after construction.

    Example:
        >>> scheduler = ECSScheduler(
        ...     cluster="production",
        ...     stack_builder=my_stack_builder,
        ...     client=ECSClusterClient(region="us-east-1"),
        ... )
        >>> scheduler.scale_process("acme-inc", "web", 3)
        >>> scheduler.tasks("acme-inc")
        [Task(id='0b69d5c0-...', state='RUNNING'), ...]
    """

    def __init__(
        self,
        cluster: str,
        stack_builder: StackBuilder,
        client: ClusterClient,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """Initialize the scheduler.

        Args:
            cluster: ECS cluster every service call is scoped to
            stack_builder: Converges manifests and resolves process services
            client: Issues per-service ECS calls
            max_workers: Services whose tasks are fetched concurrently in
                         tasks(); 1 fetches them one after another
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._cluster = cluster
        self._stack_builder = stack_builder
        self._client = client
        self._max_workers = max_workers

    @classmethod
    def from_config(
        cls,
        stack_builder: StackBuilder,
        cluster: Optional[str] = None,
        client: Optional[ClusterClient] = None,
        max_workers: Optional[int] = None,
        config: Optional[Dict[str, Any]] = None,
    ) -> "ECSScheduler":
        """Build a scheduler from explicit arguments and configuration.

        Priority for each setting: explicit argument > config.json >
        environment (ECS_CLUSTER, ECS_MAX_WORKERS, AWS_REGION) > default.
        An ECSClusterClient is created when no client is given.
        """
        cluster = cluster or get_config_value(
            ["ecs", "cluster"], default=DEFAULT_CLUSTER, config=config
        )
        if max_workers is None:
            max_workers = get_int_config_value(
                ["ecs", "max_workers"], default=DEFAULT_MAX_WORKERS, config=config
            )
        if client is None:
            client = ECSClusterClient(
                region=get_config_value(["aws", "region"], config=config)
            )
        return cls(
            cluster=cluster,
            stack_builder=stack_builder,
            client=client,
            max_workers=max_workers,
        )

    @property
    def cluster(self) -> str:
        return self._cluster

    def up(self, manifest: Manifest) -> None:
        """Converge the app to the manifest via the StackBuilder."""
        logger.info(
            f"Building {manifest.app_id} with {len(manifest.processes)} process(es)"
        )
        self._stack_builder.build(manifest)

    def remove(self, app_id: str) -> None:
        logger.info(f"Removing {app_id}")
        self._stack_builder.remove(app_id)

    def scale_process(self, app_id: str, process_name: str, count: int) -> None:
        """Set the desired count of one process's service.

        Raises:
            ProcessNotFoundError: If the app has no service for the process.
                                  No ECS call is made in that case.
        """
        services = self._stack_builder.services(app_id)
        service = services.get(process_name)
        if service is None:
            raise ProcessNotFoundError(app_id, process_name)

        logger.info(f"Scaling {app_id} {process_name} ({service}) to {count}")
        self._client.update_desired_count(self._cluster, service, count)

    def tasks(self, app_id: str) -> List[Task]:
        """List the running tasks of every process in the app.

        Tasks from all services are returned in one list with no ordering
        guarantee across services. Services are queried in parallel when
        there is more than one; if any of them fails the whole call fails
        with that error and no partial list is returned.

        Raises:
            InvalidTaskArnError: If ECS reports a task ARN without a task id
            MissingTaskDescriptionError: If ECS does not describe a listed task
        """
        services = self._stack_builder.services(app_id)
        if not services:
            logger.debug(f"{app_id} has no services")
            return []

        service_ids = list(services.values())
        if self._max_workers == 1 or len(service_ids) == 1:
            results = [self._service_tasks(service) for service in service_ids]
        else:
            results = self._gather_service_tasks(service_ids)

        tasks = [task for service_tasks in results for task in service_tasks]
        logger.debug(f"{app_id}: {len(tasks)} task(s) across {len(service_ids)} service(s)")
        return tasks

    def restart(self, app_id: str) -> None:
        logger.info(f"Restarting {app_id}")
        self._stack_builder.restart(app_id)

    def _gather_service_tasks(self, service_ids: List[str]) -> List[List[Task]]:
        workers = min(self._max_workers, len(service_ids))
        results: List[List[Task]] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._service_tasks, s) for s in service_ids]
            try:
                for future in as_completed(futures):
                    results.append(future.result())
            except Exception:
                for future in futures:
                    future.cancel()
                raise
        return results

    def _service_tasks(self, service: str) -> List[Task]:
        arns = self._client.list_task_arns(self._cluster, service)
        if not arns:
            return []

        descriptors = self._client.describe_tasks(self._cluster, arns)
        by_arn = {d["taskArn"]: d for d in descriptors}
        missing = [arn for arn in arns if arn not in by_arn]
        if missing:
            raise MissingTaskDescriptionError(service, missing)

        return [
            Task(id=task_id_from_arn(arn), state=by_arn[arn]["lastStatus"])
            for arn in arns
        ]
