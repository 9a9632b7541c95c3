"""Scheduler exceptions.

Errors raised by the stack builder or the cluster client are never wrapped in
these; they reach the caller unchanged. The classes here cover only failures
the scheduler detects itself.
"""

from typing import List


class ProcessNotFoundError(Exception):
    """Raised when an app has no service for the requested process.

    Attributes:
        app_id: The app that was looked up
        process_name: The process that is missing from the service mapping
    """

    def __init__(self, app_id: str, process_name: str) -> None:
        super().__init__(f"{process_name} process not found")
        self.app_id = app_id
        self.process_name = process_name


class InvalidTaskArnError(ValueError):
    """Raised when a task ARN has no resource id after its last "/".

    Attributes:
        arn: The offending ARN as reported by the backend
    """

    def __init__(self, arn: str) -> None:
        super().__init__(f"Malformed task ARN: {arn!r}")
        self.arn = arn


class MissingTaskDescriptionError(Exception):
    """Raised when a describe response omits tasks that were listed.

    Attributes:
        service: Service the tasks were listed for
        missing_arns: Listed ARNs that had no matching descriptor
    """

    def __init__(self, service: str, missing_arns: List[str]) -> None:
        super().__init__(
            f"No description returned for {len(missing_arns)} task(s) "
            f"of service {service}: {', '.join(missing_arns)}"
        )
        self.service = service
        self.missing_arns = missing_arns
