"""Pytest shared fixtures for the xkepster client tests."""
import json
import pathlib
import sys

import pytest
import requests

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from xkepster.config import settings
from xkepster.core.client import XkepsterClient

XKEPSTER_ENV_VARS = (
    "XKEPSTER_API_KEY",
    "XKEPSTER_BASE_URL",
    "XKEPSTER_TIMEOUT",
    "XKEPSTER_OPEN_TIMEOUT",
    "XKEPSTER_LOG_LEVEL",
    "XKEPSTER_LOGGING_ENABLED",
    "XKEPSTER_WEBHOOK_SECRET",
    "XKEPSTER_MACHINE_TOKEN",
)


# ─────────────────────────────────────────────────────────────────────────────
# Environment isolation
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Clear XKEPSTER_* variables, hide /run/secrets and reset the default config."""
    for name in XKEPSTER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    secrets_dir = tmp_path / "run-secrets"
    secrets_dir.mkdir()
    real_path = settings.Path

    def fake_path(target, *rest):
        if str(target) == "/run/secrets":
            return secrets_dir
        return real_path(target, *rest)

    monkeypatch.setattr(settings, "Path", fake_path)
    settings.reset_configuration()
    yield secrets_dir
    settings.reset_configuration()


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """Fail loudly if a unit test reaches a real requests.Session."""
    if request.node.get_closest_marker("integration"):
        return

    def _blocked(self, method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")

    monkeypatch.setattr(requests.Session, "request", _blocked)


class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload=None, content: bytes = None):
        self.status_code = status_code
        if content is None:
            content = b"" if payload is None else json.dumps(payload).encode("utf-8")
        self.content = content
        self.text = content.decode("utf-8", errors="replace")
        self.headers = {"Content-Type": "application/vnd.api+json"}


class FakeSession:
    """Records requests and replays queued responses or exceptions."""

    def __init__(self):
        self.calls = []
        self.queue = []
        self.closed = False

    def respond(self, status_code: int = 200, payload=None, content: bytes = None):
        self.queue.append(StubResponse(status_code, payload, content))
        return self

    def fail_with(self, exc: BaseException):
        self.queue.append(exc)
        return self

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.queue:
            return StubResponse(200, {"data": []})
        outcome = self.queue.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self):
        self.closed = True

    @property
    def last_call(self):
        return self.calls[-1]

    @property
    def last_body(self):
        data = self.last_call.get("data")
        return json.loads(data) if data is not None else None


@pytest.fixture()
def fake_session(monkeypatch):
    session = FakeSession()
    monkeypatch.setattr(XkepsterClient, "_build_session", lambda self: session)
    return session


@pytest.fixture()
def client(fake_session):
    """Client with a test API key and the fake transport."""
    return XkepsterClient(api_key="test_key", base_url="https://api.xkepster.com")
