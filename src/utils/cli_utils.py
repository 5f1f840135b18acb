import os
import shlex
from typing import Any, Dict
from logging import getLogger
from utils.file_utils import load_environment

logger = getLogger(__name__)

# Config key -> environment variable read back by BuildInputs.from_environment
ENVIRONMENT_KEYS = {
    "executor": "KANIKO_EXECUTOR",
    "cache": "KANIKO_CACHE",
    "cache_repository": "KANIKO_CACHE_REPOSITORY",
    "cache_ttl": "KANIKO_CACHE_TTL",
    "push_retry": "KANIKO_PUSH_RETRY",
    "registry_mirrors": "KANIKO_REGISTRY_MIRRORS",
    "verbosity": "KANIKO_VERBOSITY",
    "kaniko_args": "KANIKO_ARGS",
    "build_args": "KANIKO_BUILD_ARGS",
    "context": "KANIKO_CONTEXT",
    "file": "KANIKO_FILE",
    "labels": "KANIKO_LABELS",
    "push": "KANIKO_PUSH",
    "tags": "KANIKO_TAGS",
    "target": "KANIKO_TARGET",
    "extra_context": "KANIKO_EXTRA_CONTEXT",
    "verbose": "VERBOSE",
    "dry_run": "DRY_RUN",
    "log_dir": "LOG_DIR",
}

PATH_KEYS = ("context", "file", "log_dir")


def _to_environment_value(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (list, tuple)):
        # kaniko_args are shell-split later, everything else is one entry per line
        if key == "kaniko_args":
            return shlex.join(str(item) for item in value)
        return "\n".join(str(item) for item in value)
    value = str(value)
    if key in PATH_KEYS:
        return os.path.expanduser(os.path.expandvars(value))
    return value


def set_environment_variables(config: Dict[str, Any]):
    """Export the resolved configuration so the build helper can read it back.

    Values that are None are skipped, leaving whatever the environment or
    the .env file already provides.
    """
    load_environment()
    for key, value in config.items():
        env_key = ENVIRONMENT_KEYS.get(key)
        if env_key is None:
            logger.warning(f"Ignoring unknown config key: {key}")
            continue
        if value is None:
            continue
        os.environ[env_key] = _to_environment_value(key, value)

    # Only names: extra context often carries registry credentials
    logger.debug(
        f"Environment keys set: {[k for k in ENVIRONMENT_KEYS.values() if k in os.environ]}"
    )
