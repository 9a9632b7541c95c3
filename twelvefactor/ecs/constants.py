"""ECS constants shared by the client and the scheduler."""

# Upper bound on task ARNs per DescribeTasks request, imposed by the ECS API
DESCRIBE_TASKS_BATCH_SIZE = 100

DEFAULT_CLUSTER = "default"

# Services whose tasks are fetched in parallel by ECSScheduler.tasks
DEFAULT_MAX_WORKERS = 4
