import os
import pytest
from unittest.mock import patch

from utils.cli_utils import ENVIRONMENT_KEYS


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path):
    """Keep exported build settings from leaking between tests."""
    with patch.dict(os.environ):
        for key in list(ENVIRONMENT_KEYS.values()) + ["GITHUB_OUTPUT", "RUNNER_TEMP"]:
            os.environ.pop(key, None)
        os.environ["LOG_DIR"] = str(tmp_path / "logs")
        yield
