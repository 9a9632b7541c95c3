"""StackBuilder protocol for converging apps into ECS services."""

from typing import Dict, Protocol

from twelvefactor.core.schema.manifest import Manifest


class StackBuilder(Protocol):
    """Creates, updates and tears down the ECS services of an app.

    The scheduler hands whole manifests to a StackBuilder and asks it which
    service backs each process. How the builder provisions resources, names
    them or diffs against existing state is up to the implementation, as is
    serializing concurrent build/remove/restart calls for the same app.
    """

    def build(self, manifest: Manifest) -> None:
        """Converge every process in the manifest to a running service.

        Must be idempotent: building the same manifest twice leaves the
        services unchanged.
        """
        ...

    def remove(self, app_id: str) -> None:
        """Delete every service that belongs to the app."""
        ...

    def services(self, app_id: str) -> Dict[str, str]:
        """Return the current process name -> ECS service mapping for the app.

        Service identifiers are opaque to callers. An app with no services
        maps to an empty dict.
        """
        ...

    def restart(self, app_id: str) -> None:
        """Force new deployments of the app's services with unchanged config."""
        ...
