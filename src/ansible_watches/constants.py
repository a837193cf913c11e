# Defaults for optional fields on a Watch
MAX_RUNNER_ARTIFACTS_DEFAULT = 20
RECONCILE_PERIOD_DEFAULT = "0s"
MANAGE_STATUS_DEFAULT = True
WATCH_DEPENDENT_RESOURCES_DEFAULT = True
WATCH_CLUSTER_SCOPED_RESOURCES_DEFAULT = False

# Process-wide defaults, overridden by operator configuration
DEFAULT_MAX_WORKERS = 1
DEFAULT_ANSIBLE_VERBOSITY = 2

MIN_ANSIBLE_VERBOSITY = 0
MAX_ANSIBLE_VERBOSITY = 7

# Per-GVK environment variable prefixes
WORKER_ENV_PREFIX = "WORKER"
ANSIBLE_VERBOSITY_ENV_PREFIX = "ANSIBLE_VERBOSITY"

# Operator configuration environment variables
WATCHES_FILE_ENV = "WATCHES_FILE"
MAX_CONCURRENT_RECONCILES_ENV = "MAX_CONCURRENT_RECONCILES"
ANSIBLE_VERBOSITY_ENV = "ANSIBLE_VERBOSITY"
METRICS_PORT_ENV = "METRICS_PORT"
LOG_LEVEL_ENV = "LOG_LEVEL"

WATCHES_FILE_DEFAULT = "/opt/ansible/watches.yaml"
METRICS_PORT_DEFAULT = 8080
LOG_LEVEL_DEFAULT = "INFO"

# Keys in watches.yaml that are resolved from the environment only
ENV_ONLY_KEYS = ("maxWorkers", "ansibleVerbosity")
