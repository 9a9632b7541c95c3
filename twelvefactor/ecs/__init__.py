"""ECS backend for twelvefactor.

This package runs 12factor apps on Amazon ECS:
- ECSScheduler: Scheduler implementation over ECS services and tasks
- StackBuilder: Protocol for the component that converges manifests
- ClusterClient / ECSClusterClient: Per-service ECS calls, boto3-backed
"""

from twelvefactor.ecs.client import ClusterClient, ECSClusterClient
from twelvefactor.ecs.scheduler import ECSScheduler
from twelvefactor.ecs.stack import StackBuilder

__all__ = [
    "ClusterClient",
    "ECSClusterClient",
    "ECSScheduler",
    "StackBuilder",
]
