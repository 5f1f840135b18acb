import json
import os
import tempfile
from typing import Any, Dict, List, Tuple
from dotenv import load_dotenv
import logging
import yaml

logger = logging.getLogger(__name__)


def load_json_file(path: str) -> Any:
    """Load a JSON file."""
    with open(path, "r") as file:
        return json.load(file)


def load_yaml_file(path: str) -> dict:
    """Load a YAML file."""
    with open(path, "r") as file:
        return yaml.safe_load(file)


def load_config_file(path: str) -> Dict[str, Any]:
    """Load a JSON or YAML config file, picked by extension."""
    if path.endswith((".yml", ".yaml")):
        config = load_yaml_file(path)
    else:
        config = load_json_file(path)
    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping. Got {type(config).__name__} instead.")
    return config


def load_environment():
    """Load environment variables from .env file."""
    env_path = os.path.join(os.getcwd(), ".env")
    load_dotenv(env_path)


def runner_temp_dir() -> str:
    return os.getenv("RUNNER_TEMP") or tempfile.gettempdir()


def make_temp_dir(prefix: str) -> str:
    """Create a fresh directory under the runner temp dir."""
    path = tempfile.mkdtemp(prefix=prefix, dir=runner_temp_dir())
    logger.debug(f"Created temporary directory {path}")
    return path


def write_extra_context(
    extra_context: List[Tuple[str, str]], temp_dir: str
) -> List[Tuple[str, str]]:
    """Write each (name, content) pair to temp_dir and return (name, path) pairs."""
    result: List[Tuple[str, str]] = []
    for name, content in extra_context:
        path = os.path.join(temp_dir, name)
        with open(path, "w", newline="") as file:
            file.write(content)
        result.append((name, path))
    return result


def read_content(path: str) -> str:
    with open(path, "r") as file:
        return file.read().strip()
