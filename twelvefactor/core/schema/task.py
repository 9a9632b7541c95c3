"""Task model for running process instances."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Task:
    """One running instance of a process, as observed on the backend.

    Attributes:
        id: Backend-local task identifier (e.g. the id part of an ECS task ARN)
        state: Lifecycle label exactly as the backend reports it
               (e.g. "PENDING", "RUNNING", "STOPPED")
    """

    id: str
    state: str
