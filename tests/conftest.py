import os

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: mark slow tests (use --run-slow)")


def pytest_collection_modifyitems(config, items):
    run_slow = (
        config.getoption("--run-slow")
        or os.getenv("RAIDRECORD_RUN_SLOW_TESTS") == "1"
    )
    if not run_slow:
        skip_slow = pytest.mark.skip(
            reason="slow tests skipped (use --run-slow or RAIDRECORD_RUN_SLOW_TESTS=1)"
        )
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Ensure tests run with a clean environment.

    Unset RAIDRECORD_* variables so real credentials never reach a test.
    """
    for k in [k for k in os.environ.keys() if k.startswith("RAIDRECORD_")]:
        monkeypatch.delenv(k, raising=False)
    yield


@pytest.fixture
def tier_catalog():
    from raidrecord.core.models import default_tier_catalog

    return default_tier_catalog()
