"""
twelvefactor: Scheduler adapters for 12factor apps

Translates declarative app manifests (named processes, images, desired
counts) into operations against a container orchestration backend. The
backend-agnostic contract lives in twelvefactor.core; the Amazon ECS
implementation lives in twelvefactor.ecs.
"""

from twelvefactor.core.errors import (
    InvalidTaskArnError,
    MissingTaskDescriptionError,
    ProcessNotFoundError,
)
from twelvefactor.core.schema import Manifest, Process, Scheduler, Task

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "InvalidTaskArnError",
    "Manifest",
    "MissingTaskDescriptionError",
    "Process",
    "ProcessNotFoundError",
    "Scheduler",
    "Task",
]
