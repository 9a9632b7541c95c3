"""ECS cluster client - thin boto3 wrapper.

ClusterClient is the narrow slice of the ECS API the scheduler consumes.
ECSClusterClient implements it on top of boto3 and adds nothing beyond
pagination and request batching: no retries, no error translation. Errors
raised by boto3 (botocore.exceptions.ClientError and friends) propagate
unchanged.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

import boto3
from botocore.config import Config

from twelvefactor.core.config import get_config_value
from twelvefactor.ecs.constants import DESCRIBE_TASKS_BATCH_SIZE
from twelvefactor.ecs.utils import chunked

logger = logging.getLogger(__name__)


class ClusterClient(Protocol):
    """Per-service ECS operations, each scoped to one cluster."""

    def update_desired_count(self, cluster: str, service: str, count: int) -> None:
        """Set the desired task count of a service."""
        ...

    def list_task_arns(self, cluster: str, service: str) -> List[str]:
        """Return the ARNs of the service's current tasks."""
        ...

    def describe_tasks(self, cluster: str, task_arns: List[str]) -> List[Dict[str, Any]]:
        """Return ECS task descriptors (with taskArn and lastStatus) for the ARNs."""
        ...


class ECSClusterClient:
    """ClusterClient backed by ``boto3.client("ecs")``.

    Configuration priority for the region: explicit parameter > config.json
    (``aws.region``) > AWS_REGION > boto3's own resolution chain.

    Timeouts belong to the boto3 client: pass a botocore ``Config`` to bound
    how long any single call may take.

    Example:
        >>> client = ECSClusterClient(region="us-east-1")
        >>> client.list_task_arns("production", "acme-inc--web")
        ['arn:aws:ecs:us-east-1:012345678910:task/0b69d5c0-...']
    """

    def __init__(
        self,
        region: Optional[str] = None,
        client: Optional[Any] = None,
        botocore_config: Optional[Config] = None,
    ):
        """Initialize the client.

        Args:
            region: AWS region (loads from config.json if None)
            client: Pre-built boto3 ECS client; region and botocore_config
                    are ignored when given
            botocore_config: Optional botocore Config (timeouts, retries)
        """
        if client is not None:
            self._client = client
            self.region = region
            return

        self.region = region or get_config_value(["aws", "region"])
        self._client = boto3.client(
            "ecs", region_name=self.region, config=botocore_config
        )

    def update_desired_count(self, cluster: str, service: str, count: int) -> None:
        logger.debug(f"UpdateService cluster={cluster} service={service} desiredCount={count}")
        self._client.update_service(
            cluster=cluster,
            service=service,
            desiredCount=count,
        )

    def list_task_arns(self, cluster: str, service: str) -> List[str]:
        """Return all task ARNs of a service, following pagination."""
        paginator = self._client.get_paginator("list_tasks")
        arns: List[str] = []
        for page in paginator.paginate(cluster=cluster, serviceName=service):
            arns.extend(page.get("taskArns", []))
        logger.debug(f"ListTasks cluster={cluster} service={service}: {len(arns)} task(s)")
        return arns

    def describe_tasks(self, cluster: str, task_arns: List[str]) -> List[Dict[str, Any]]:
        """Describe tasks in batches the ECS API accepts.

        An empty ARN list returns an empty list without calling ECS, which
        rejects empty requests. ARNs reported under ``failures`` are logged
        and left out of the result.
        """
        tasks: List[Dict[str, Any]] = []
        for batch in chunked(task_arns, DESCRIBE_TASKS_BATCH_SIZE):
            response = self._client.describe_tasks(cluster=cluster, tasks=batch)
            tasks.extend(response.get("tasks", []))
            for failure in response.get("failures", []):
                logger.debug(
                    f"DescribeTasks failure for {failure.get('arn')}: {failure.get('reason')}"
                )
        return tasks
