# tests/conftest.py
import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from remediation_handler.core.config import Settings
from remediation_handler.models.event import Event

API_URL = "http://sensu.test:8080"
ANNOTATION = "io.sensu.remediation.config.actions"


def make_response(status_code: int, body: Any = "", reason: Optional[str] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if not isinstance(body, str):
        body = json.dumps(body)
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Stands in for requests.Session: replies from a (method, url) routing table and records every call."""

    def __init__(self, routes: Optional[Dict[tuple, Any]] = None):
        self.routes = routes if routes is not None else {}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        reply = self.routes.get((method, url))
        if reply is None:
            return make_response(599, "no route", reason="Unrouted")
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "SENSU_API_URL", "SENSU_API_PROTOCOL", "SENSU_API_HOST", "SENSU_API_PORT", "SENSU_API_KEY",
        "SENSU_API_USER", "SENSU_API_PASSWORD", "SENSU_TRUSTED_CA_FILE", "SENSU_REMEDIATION_ANNOTATION",
        "REQUEST_TIMEOUT", "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def key_settings() -> Settings:
    return Settings(_env_file=None, SENSU_API_URL=API_URL, SENSU_API_KEY="secret-key")


@pytest.fixture
def user_settings() -> Settings:
    return Settings(_env_file=None, SENSU_API_URL=API_URL, SENSU_API_USER="admin", SENSU_API_PASSWORD="P@ssw0rd!")


def event_document(
    status: int = 2,
    occurrences: int = 1,
    policy: Any = None,
    entity: str = "web-01",
    namespace: str = "default",
    annotation: str = ANNOTATION,
) -> Dict[str, Any]:
    annotations = {}
    if policy is not None:
        annotations[annotation] = policy if isinstance(policy, str) else json.dumps(policy)
    return {
        "check": {
            "metadata": {"name": "check-nginx", "namespace": namespace, "annotations": annotations},
            "status": status,
            "occurrences": occurrences,
            "output": "CRITICAL: nginx is not running",
        },
        "entity": {
            "entity_class": "agent",
            "metadata": {"name": entity, "namespace": namespace},
        },
        "timestamp": 1700000000,
    }


def make_event(**kwargs) -> Event:
    return Event.model_validate(event_document(**kwargs))


RESTART_NGINX = [{"request": "restart-nginx", "occurrences": [1, 2, 3], "severities": [1, 2], "subscriptions": []}]
