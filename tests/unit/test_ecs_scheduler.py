"""Tests for ECSScheduler."""

import threading
from unittest.mock import MagicMock, call

import pytest

from twelvefactor.core.errors import (
    InvalidTaskArnError,
    MissingTaskDescriptionError,
    ProcessNotFoundError,
)
from twelvefactor.core.schema.manifest import Manifest, Process
from twelvefactor.core.schema.task import Task
from twelvefactor.ecs.client import ClusterClient
from twelvefactor.ecs.scheduler import ECSScheduler
from twelvefactor.ecs.stack import StackBuilder

TASK_ARN = "arn:aws:ecs:us-east-1:012345678910:task/0b69d5c0-d655-4695-98cd-5d2d526d9d5a"
WORKER_ARN = "arn:aws:ecs:us-east-1:012345678910:task/1f7e9b3a-2c4d-4e5f-8a9b-0c1d2e3f4a5b"


@pytest.fixture
def stack_builder():
    return MagicMock(spec=StackBuilder)


@pytest.fixture
def client():
    return MagicMock(spec=ClusterClient)


@pytest.fixture
def scheduler(stack_builder, client):
    return ECSScheduler(cluster="cluster", stack_builder=stack_builder, client=client)


class TestDelegation:
    """Tests for operations passed straight to the StackBuilder."""

    def test_up(self, scheduler, stack_builder, client):
        """Test that up builds the manifest exactly once."""
        manifest = Manifest(app_id="app")

        assert scheduler.up(manifest) is None

        stack_builder.build.assert_called_once_with(manifest)
        assert client.method_calls == []

    def test_up_propagates_error(self, scheduler, stack_builder):
        """Test that build errors reach the caller unchanged."""
        error = RuntimeError("stack update failed")
        stack_builder.build.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            scheduler.up(Manifest(app_id="app", processes=[Process(name="web", image="app:v1")]))

        assert exc_info.value is error
        assert stack_builder.build.call_count == 1

    def test_remove(self, scheduler, stack_builder):
        """Test that remove tears down the app exactly once."""
        scheduler.remove("app")

        stack_builder.remove.assert_called_once_with("app")

    def test_remove_propagates_error(self, scheduler, stack_builder):
        """Test that remove errors reach the caller unchanged."""
        error = RuntimeError("stack delete failed")
        stack_builder.remove.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            scheduler.remove("app")

        assert exc_info.value is error

    def test_restart(self, scheduler, stack_builder, client):
        """Test that restart delegates exactly once."""
        scheduler.restart("app")

        stack_builder.restart.assert_called_once_with("app")
        assert client.method_calls == []

    def test_restart_propagates_error(self, scheduler, stack_builder):
        """Test that restart errors reach the caller unchanged."""
        error = RuntimeError("redeploy failed")
        stack_builder.restart.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            scheduler.restart("app")

        assert exc_info.value is error


class TestScaleProcess:
    """Tests for ECSScheduler.scale_process."""

    def test_scale_process(self, scheduler, stack_builder, client):
        """Test that scaling updates the resolved service."""
        stack_builder.services.return_value = {"web": "app--web"}

        scheduler.scale_process("app", "web", 1)

        stack_builder.services.assert_called_once_with("app")
        client.update_desired_count.assert_called_once_with("cluster", "app--web", 1)

    def test_scale_process_not_found(self, scheduler, stack_builder, client):
        """Test that an unknown process fails without any ECS call."""
        stack_builder.services.return_value = {}

        with pytest.raises(ProcessNotFoundError, match="web process not found") as exc_info:
            scheduler.scale_process("app", "web", 1)

        assert exc_info.value.app_id == "app"
        assert exc_info.value.process_name == "web"
        assert client.method_calls == []

    def test_scale_process_uses_service_id_verbatim(self, scheduler, stack_builder, client):
        """Test that the service id is not derived from the app and process names."""
        stack_builder.services.return_value = {"web": "app-WebService-1A2B3C"}

        scheduler.scale_process("app", "web", 0)

        client.update_desired_count.assert_called_once_with(
            "cluster", "app-WebService-1A2B3C", 0
        )

    def test_scale_process_twice_updates_twice(self, scheduler, stack_builder, client):
        """Test that repeated calls are not de-duplicated."""
        stack_builder.services.return_value = {"web": "app--web"}

        scheduler.scale_process("app", "web", 1)
        scheduler.scale_process("app", "web", 1)

        assert stack_builder.services.call_count == 2
        assert client.update_desired_count.call_args_list == [
            call("cluster", "app--web", 1),
            call("cluster", "app--web", 1),
        ]

    def test_scale_process_propagates_update_error(self, scheduler, stack_builder, client):
        """Test that update errors reach the caller unchanged."""
        stack_builder.services.return_value = {"web": "app--web"}
        error = RuntimeError("ServiceNotActiveException")
        client.update_desired_count.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            scheduler.scale_process("app", "web", 2)

        assert exc_info.value is error

    def test_scale_process_propagates_services_error(self, scheduler, stack_builder, client):
        """Test that lookup errors abort before any ECS call."""
        stack_builder.services.side_effect = RuntimeError("stack not found")

        with pytest.raises(RuntimeError, match="stack not found"):
            scheduler.scale_process("app", "web", 2)

        assert client.method_calls == []


class TestTasks:
    """Tests for ECSScheduler.tasks."""

    def test_tasks(self, scheduler, stack_builder, client):
        """Test that task ARNs and statuses map to Tasks."""
        stack_builder.services.return_value = {"web": "app--web"}
        client.list_task_arns.return_value = [TASK_ARN]
        client.describe_tasks.return_value = [
            {"taskArn": TASK_ARN, "lastStatus": "RUNNING"},
        ]

        tasks = scheduler.tasks("app")

        assert tasks == [Task(id="0b69d5c0-d655-4695-98cd-5d2d526d9d5a", state="RUNNING")]
        client.list_task_arns.assert_called_once_with("cluster", "app--web")
        client.describe_tasks.assert_called_once_with("cluster", [TASK_ARN])

    def test_tasks_no_services(self, scheduler, stack_builder, client):
        """Test that an app without services has no tasks."""
        stack_builder.services.return_value = {}

        assert scheduler.tasks("app") == []
        assert client.method_calls == []

    def test_tasks_service_without_tasks(self, scheduler, stack_builder, client):
        """Test that a service with no tasks is not described."""
        stack_builder.services.return_value = {"web": "app--web"}
        client.list_task_arns.return_value = []

        assert scheduler.tasks("app") == []
        client.describe_tasks.assert_not_called()

    def test_tasks_state_copied_verbatim(self, scheduler, stack_builder, client):
        """Test that backend states are not normalized."""
        stack_builder.services.return_value = {"web": "app--web"}
        client.list_task_arns.return_value = [TASK_ARN]
        client.describe_tasks.return_value = [
            {"taskArn": TASK_ARN, "lastStatus": "DEPROVISIONING"},
        ]

        assert scheduler.tasks("app")[0].state == "DEPROVISIONING"

    def test_tasks_multiple_processes(self, scheduler, stack_builder, client):
        """Test that tasks from every process are aggregated."""
        stack_builder.services.return_value = {
            "web": "app--web",
            "worker": "app--worker",
        }
        arns = {"app--web": [TASK_ARN], "app--worker": [WORKER_ARN]}
        states = {TASK_ARN: "RUNNING", WORKER_ARN: "PENDING"}
        client.list_task_arns.side_effect = lambda cluster, service: arns[service]
        client.describe_tasks.side_effect = lambda cluster, task_arns: [
            {"taskArn": arn, "lastStatus": states[arn]} for arn in task_arns
        ]

        tasks = scheduler.tasks("app")

        assert sorted(tasks, key=lambda t: t.id) == [
            Task(id="0b69d5c0-d655-4695-98cd-5d2d526d9d5a", state="RUNNING"),
            Task(id="1f7e9b3a-2c4d-4e5f-8a9b-0c1d2e3f4a5b", state="PENDING"),
        ]
        assert client.list_task_arns.call_count == 2

    def test_tasks_sequential(self, stack_builder, client):
        """Test that max_workers=1 queries services on the calling thread."""
        scheduler = ECSScheduler(
            cluster="cluster", stack_builder=stack_builder, client=client, max_workers=1
        )
        stack_builder.services.return_value = {"web": "app--web", "worker": "app--worker"}
        threads = []

        def list_task_arns(cluster, service):
            threads.append(threading.current_thread())
            return []

        client.list_task_arns.side_effect = list_task_arns

        assert scheduler.tasks("app") == []
        assert threads == [threading.current_thread()] * 2

    def test_tasks_fails_when_one_process_fails(self, scheduler, stack_builder, client):
        """Test that one failing service fails the whole call."""
        stack_builder.services.return_value = {
            "web": "app--web",
            "worker": "app--worker",
        }
        error = RuntimeError("AccessDeniedException")

        def list_task_arns(cluster, service):
            if service == "app--worker":
                raise error
            return [TASK_ARN]

        client.list_task_arns.side_effect = list_task_arns
        client.describe_tasks.return_value = [
            {"taskArn": TASK_ARN, "lastStatus": "RUNNING"},
        ]

        with pytest.raises(RuntimeError) as exc_info:
            scheduler.tasks("app")

        assert exc_info.value is error

    def test_tasks_propagates_describe_error(self, scheduler, stack_builder, client):
        """Test that describe errors reach the caller unchanged."""
        stack_builder.services.return_value = {"web": "app--web"}
        client.list_task_arns.return_value = [TASK_ARN]
        error = RuntimeError("ClusterNotFoundException")
        client.describe_tasks.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            scheduler.tasks("app")

        assert exc_info.value is error

    def test_tasks_invalid_arn(self, scheduler, stack_builder, client):
        """Test that an ARN without a task id is rejected."""
        stack_builder.services.return_value = {"web": "app--web"}
        client.list_task_arns.return_value = ["not-an-arn"]
        client.describe_tasks.return_value = [
            {"taskArn": "not-an-arn", "lastStatus": "RUNNING"},
        ]

        with pytest.raises(InvalidTaskArnError) as exc_info:
            scheduler.tasks("app")

        assert exc_info.value.arn == "not-an-arn"

    def test_tasks_missing_description(self, scheduler, stack_builder, client):
        """Test that a listed task missing from the describe response is an error."""
        stack_builder.services.return_value = {"web": "app--web"}
        client.list_task_arns.return_value = [TASK_ARN, WORKER_ARN]
        client.describe_tasks.return_value = [
            {"taskArn": TASK_ARN, "lastStatus": "RUNNING"},
        ]

        with pytest.raises(MissingTaskDescriptionError) as exc_info:
            scheduler.tasks("app")

        assert exc_info.value.service == "app--web"
        assert exc_info.value.missing_arns == [WORKER_ARN]


class TestConstruction:
    """Tests for building schedulers."""

    def test_cluster_is_read_only(self, scheduler):
        """Test that the cluster cannot be reassigned."""
        assert scheduler.cluster == "cluster"
        with pytest.raises(AttributeError):
            scheduler.cluster = "other"

    def test_invalid_max_workers(self, stack_builder, client):
        """Test that max_workers below 1 is rejected."""
        with pytest.raises(ValueError, match="max_workers"):
            ECSScheduler(cluster="cluster", stack_builder=stack_builder, client=client, max_workers=0)

    def test_from_config(self, stack_builder, client):
        """Test that settings are read from the config dict."""
        config = {"ecs": {"cluster": "production", "max_workers": 1}}

        scheduler = ECSScheduler.from_config(stack_builder, client=client, config=config)

        assert scheduler.cluster == "production"
        stack_builder.services.return_value = {"web": "app--web"}
        scheduler.scale_process("app", "web", 3)
        client.update_desired_count.assert_called_once_with("production", "app--web", 3)

    def test_from_config_explicit_cluster_wins(self, stack_builder, client):
        """Test that an explicit cluster overrides configuration."""
        config = {"ecs": {"cluster": "production"}}

        scheduler = ECSScheduler.from_config(
            stack_builder, cluster="staging", client=client, config=config
        )

        assert scheduler.cluster == "staging"

    def test_from_config_defaults(self, stack_builder, client, monkeypatch):
        """Test defaults when nothing is configured."""
        monkeypatch.delenv("ECS_CLUSTER", raising=False)
        monkeypatch.delenv("ECS_MAX_WORKERS", raising=False)

        scheduler = ECSScheduler.from_config(stack_builder, client=client, config={})

        assert scheduler.cluster == "default"
