"""
Core schema definitions for manifests, tasks and the scheduler contract.

These backend-agnostic protocols and dataclasses are shared by every
scheduler implementation.
"""

from twelvefactor.core.schema.manifest import Manifest, Process
from twelvefactor.core.schema.scheduler import Scheduler
from twelvefactor.core.schema.task import Task

__all__ = [
    "Manifest",
    "Process",
    "Scheduler",
    "Task",
]
