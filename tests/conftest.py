import os
from pathlib import Path

import pytest

_CLI_ENV_FLAG = "ROSTERKIT_RUN_FULL_CLI_TESTS"
_CLI_PREFIXES = ("tests/test_cli_",)

EXAMPLE_ROSTER = Path(__file__).resolve().parents[1] / "examples" / "team7" / "roster.yaml"


def pytest_collection_modifyitems(config, items):
    """Skip slow CLI export tests unless explicitly enabled."""

    if os.getenv(_CLI_ENV_FLAG):
        return
    skip_cli = pytest.mark.skip(
        reason=f"Set {_CLI_ENV_FLAG}=1 to run the CLI export test suite."
    )
    for item in items:
        nodeid = item.nodeid
        if nodeid.startswith(_CLI_PREFIXES):
            item.add_marker(skip_cli)


@pytest.fixture
def example_roster_path() -> Path:
    return EXAMPLE_ROSTER
