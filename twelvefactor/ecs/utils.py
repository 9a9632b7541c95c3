"""Helpers for ECS identifiers and request batching."""

from typing import Iterator, List, Sequence, TypeVar

from twelvefactor.core.errors import InvalidTaskArnError

T = TypeVar("T")


def task_id_from_arn(arn: str) -> str:
    """Extract the task id from a fully-qualified task ARN.

    The id is the trailing path segment of the resource part, for both the
    old and new ARN formats:

        arn:aws:ecs:us-east-1:012345678910:task/0b69d5c0-...
        arn:aws:ecs:us-east-1:012345678910:task/my-cluster/0b69d5c0-...

    Args:
        arn: Task ARN as returned by ListTasks/DescribeTasks

    Returns:
        The task id

    Raises:
        InvalidTaskArnError: If the ARN has no "/" or nothing follows the last one
    """
    if "/" not in arn:
        raise InvalidTaskArnError(arn)
    task_id = arn.rsplit("/", 1)[1]
    if not task_id:
        raise InvalidTaskArnError(arn)
    return task_id


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive slices of at most ``size`` items."""
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])
