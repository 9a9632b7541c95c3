"""Manifest and Process: the desired state of an app.

A Manifest is what callers submit on deploy. It names every process of the
app along with its image, command, desired instance count and resource
limits. Manifests are owned by the caller; schedulers never retain them.
"""

import shlex
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ruamel.yaml import YAML


def _create_yaml_instance() -> YAML:
    """Create a ruamel.yaml instance for reading manifests.

    Returns:
        YAML instance using the safe loader, so documents load as plain
        dicts, lists and scalars
    """
    yaml = YAML(typ="safe", pure=True)
    yaml.allow_unicode = True
    return yaml


def _merge(base: Dict[str, str], override: Dict[str, str]) -> Dict[str, str]:
    merged = dict(base)
    merged.update(override)
    return merged


@dataclass(frozen=True)
class Process:
    """One named role within an app.

    Attributes:
        name: Process name, unique within the app (e.g. "web", "worker")
        image: Container image reference (e.g. "remind101/acme-inc:latest")
        command: Command and arguments to run in the container
        desired_count: Number of instances that should be running
        memory: Memory limit in MB (0 means backend default)
        cpu_shares: CPU shares (0 means backend default)
        env: Process-specific environment, merged over the app's
        labels: Process-specific labels, merged over the app's
    """

    name: str
    image: str
    command: List[str] = field(default_factory=list)
    desired_count: int = 0
    memory: int = 0
    cpu_shares: int = 0
    env: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Process name must not be empty")
        for attr in ("desired_count", "memory", "cpu_shares"):
            if getattr(self, attr) < 0:
                raise ValueError(
                    f"Process {self.name}: {attr} must not be negative, "
                    f"got {getattr(self, attr)}"
                )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Process":
        """Build a Process from plain data (as loaded from YAML).

        ``command`` may be given as a list or as a single shell-style string.
        """
        command = data.get("command") or []
        if isinstance(command, str):
            command = shlex.split(command)
        return cls(
            name=data["name"],
            image=data["image"],
            command=[str(arg) for arg in command],
            desired_count=int(data.get("desired_count", 0)),
            memory=int(data.get("memory", 0)),
            cpu_shares=int(data.get("cpu_shares", 0)),
            env={str(k): str(v) for k, v in (data.get("env") or {}).items()},
            labels={str(k): str(v) for k, v in (data.get("labels") or {}).items()},
        )

    def to_serializable(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "image": self.image,
            "command": list(self.command),
            "desired_count": self.desired_count,
            "memory": self.memory,
            "cpu_shares": self.cpu_shares,
            "env": dict(self.env),
            "labels": dict(self.labels),
        }


@dataclass(frozen=True)
class Manifest:
    """Full desired state of one app.

    Attributes:
        app_id: Identifier of the app
        processes: Process specs, in submission order. Names must be unique.
        env: Environment shared by every process
        labels: Labels shared by every process

    Example:
        >>> manifest = Manifest(
        ...     app_id="acme-inc",
        ...     processes=[Process(name="web", image="acme-inc:v1", desired_count=2)],
        ... )
        >>> manifest.process("web").desired_count
        2
    """

    app_id: str
    processes: List[Process] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        seen = set()
        for process in self.processes:
            if process.name in seen:
                raise ValueError(
                    f"Duplicate process name {process.name!r} in manifest for {self.app_id}"
                )
            seen.add(process.name)

    def process(self, name: str) -> Optional[Process]:
        """Return the process with the given name, or None."""
        for process in self.processes:
            if process.name == name:
                return process
        return None

    def process_env(self, process: Process) -> Dict[str, str]:
        """App environment with the process environment layered on top."""
        return _merge(self.env, process.env)

    def process_labels(self, process: Process) -> Dict[str, str]:
        """App labels with the process labels layered on top."""
        return _merge(self.labels, process.labels)

    def to_serializable(self) -> Dict[str, Any]:
        """Convert the manifest to plain, JSON-serializable data."""
        return {
            "app": self.app_id,
            "env": dict(self.env),
            "labels": dict(self.labels),
            "processes": [p.to_serializable() for p in self.processes],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        """Build a Manifest from plain data.

        Expected layout::

            app: acme-inc
            env: {RAILS_ENV: production}
            processes:
              - name: web
                image: acme-inc:v1
                command: acme-inc server
                desired_count: 2

        Raises:
            ValueError: If the app id is missing or process names repeat
            KeyError: If a process lacks a name or image
        """
        app_id = data.get("app")
        if not app_id:
            raise ValueError("Manifest requires an 'app' field")
        return cls(
            app_id=str(app_id),
            processes=[Process.from_dict(p) for p in (data.get("processes") or [])],
            env={str(k): str(v) for k, v in (data.get("env") or {}).items()},
            labels={str(k): str(v) for k, v in (data.get("labels") or {}).items()},
        )

    @classmethod
    def from_yaml(cls, content: Union[str, bytes]) -> "Manifest":
        """Parse a Manifest from a YAML document."""
        yaml = _create_yaml_instance()
        data = yaml.load(StringIO(content.decode("utf-8") if isinstance(content, bytes) else content))
        if not isinstance(data, dict):
            raise ValueError("Manifest document must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: str) -> "Manifest":
        """Load a Manifest from a YAML file.

        Example:
            >>> manifest = Manifest.from_file("acme-inc.yaml")
        """
        return cls.from_yaml(Path(file_path).read_text(encoding="utf-8"))
