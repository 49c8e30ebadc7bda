"""Shared pytest fixtures."""

import pytest

DANUBE_ENV_VARS = [
    "DANUBE_TOKEN",
    "DANUBE_API_BASE",
    "DANUBE_SITE_ID",
    "DANUBE_TEAM_ID",
    "DANUBE_SITE_NAME",
]


@pytest.fixture(autouse=True)
def clean_danube_env(monkeypatch):
    """Keep the developer's DanubeData environment out of the tests."""
    for name in DANUBE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DANUBE_NO_UPDATE_CHECK", "1")
