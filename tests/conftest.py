"""Pytest configuration and shared fixtures."""

import copy
import json
from unittest.mock import Mock, patch

import pytest
import requests

from siteflow.lib import output

T0 = 1_700_000_000.0
BASE_URL = "https://api.test/api"
SITE_NAME = "test-site"
SITE_ID = "11111111-2222-3333-4444-555555555555"


@pytest.fixture(autouse=True)
def reset_color(monkeypatch):
    """Start every test with color auto-detection (off under pytest capture)."""
    monkeypatch.setattr(output, "_color_enabled", None)


@pytest.fixture
def mock_config():
    """Standard test configuration.

    Returns
    -------
    dict
        Test configuration dictionary.
    """
    return {
        "api": {
            "token": "test-token",
            "base_url": BASE_URL,
            "timeout": 10,
        },
        "defaults": {
            "site": SITE_NAME,
        },
        "watch": {
            "interval": 5,
        },
    }


@pytest.fixture
def workflow_records():
    """API workflow records, fully hydrated with operations and logs.

    - wf-running: started just after T0, still running, one unlogged operation
    - wf-empty: finished, no operations
    - wf-logged: finished, one operation with log output
    - wf-old-logged: finished earlier than wf-logged, also has logs
    """
    return [
        {
            "id": "wf-running",
            "description": "Deploy code to dev",
            "environment": "dev",
            "created_at": T0 + 1,
            "finished_at": None,
            "phase": "started",
            "user": {"email": "dev@example.com"},
            "operations": [
                {
                    "id": "op-1",
                    "type": "platform",
                    "description": "Sync code",
                    "result": "",
                    "run_time": None,
                },
            ],
        },
        {
            "id": "wf-empty",
            "description": "Clear caches",
            "environment": "live",
            "created_at": T0 - 100,
            "finished_at": T0 - 50,
            "phase": "succeeded",
            "total_time": 50,
            "operations": [],
        },
        {
            "id": "wf-logged",
            "description": "Deploy code to live",
            "environment": "live",
            "created_at": T0 - 500,
            "finished_at": T0 - 400,
            "phase": "succeeded",
            "user": {"email": "ops@example.com"},
            "total_time": 100,
            "operations": [
                {
                    "id": "op-a",
                    "type": "quicksilver",
                    "description": "Run deploy hook",
                    "result": "succeeded",
                    "run_time": 1.5,
                    "log_output": "hook ran\nall good",
                },
                {
                    "id": "op-b",
                    "type": "platform",
                    "description": "Restart PHP",
                    "result": "succeeded",
                    "run_time": 0.25,
                    "log_output": "",
                },
            ],
        },
        {
            "id": "wf-old-logged",
            "description": "Deploy code to test",
            "environment": "test",
            "created_at": T0 - 2000,
            "finished_at": T0 - 1900,
            "phase": "succeeded",
            "operations": [
                {
                    "id": "op-old",
                    "type": "quicksilver",
                    "description": "Run deploy hook",
                    "result": "succeeded",
                    "run_time": 2,
                    "log_output": "older hook output",
                },
            ],
        },
    ]


def make_response(data, status_code: int = 200) -> Mock:
    """Build a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.json.return_value = data
    response.text = json.dumps(data)
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


def _hydrate(record: dict, hydrate: str | None) -> dict:
    record = copy.deepcopy(record)
    if hydrate is None:
        record.pop("operations", None)
    elif hydrate == "operations":
        for operation in record.get("operations", []):
            operation.pop("log_output", None)
    return record


class FakePlatformAPI:
    """In-memory stand-in for the platform API behind requests.Session.get."""

    def __init__(self, records: list[dict]):
        self.records = records
        self.failures: dict[str, Mock] = {}

    def fail(self, path: str, status_code: int) -> None:
        self.failures[path] = make_response({"error": "failed"}, status_code)

    def get(self, url, params=None, timeout=None):
        assert url.startswith(BASE_URL + "/")
        path = url[len(BASE_URL) + 1 :]
        hydrate = (params or {}).get("hydrate")

        if path in self.failures:
            return self.failures[path]

        if path == f"site-names/{SITE_NAME}":
            return make_response({"id": SITE_ID})

        if path == f"sites/{SITE_ID}/workflows":
            return make_response([_hydrate(r, hydrate) for r in self.records])

        prefix = f"sites/{SITE_ID}/workflows/"
        if path.startswith(prefix):
            workflow_id = path[len(prefix) :]
            for record in self.records:
                if record["id"] == workflow_id:
                    return make_response(_hydrate(record, hydrate))

        return make_response({"error": "not found"}, 404)


@pytest.fixture
def fake_api(workflow_records):
    """Patch requests.Session.get with an in-memory platform API.

    Yields
    ------
    tuple[FakePlatformAPI, Mock]
        The fake API (edit ``records`` or call ``fail``) and the patched get.
    """
    api = FakePlatformAPI(workflow_records)
    with patch("requests.Session.get", side_effect=api.get) as mock_get:
        yield api, mock_get


@pytest.fixture
def make_ctx(mock_config):
    """Build a command context for the workflows command."""

    def _make(subcommand, output_format="normal", verbose=False, quiet=False, **arg_values):
        values = {
            "workflows_subcommand": subcommand,
            "site": None,
            "workflow_id": None,
            "latest": False,
        }
        values.update(arg_values)
        return {
            "config": mock_config,
            "verbose": verbose,
            "quiet": quiet,
            "output_format": output_format,
            "args": Mock(**values),
        }

    return _make
