# remediation_handler/services/dispatcher.py
import logging
from urllib.parse import quote

import requests

from remediation_handler.core.config import Settings
from remediation_handler.core.exceptions import DispatchError
from remediation_handler.models.remediation import DispatchResult, ExecutionRequest, MatchResult
from remediation_handler.services.credential_provider import status_text
from remediation_handler.services.http_client import send

logger = logging.getLogger(__name__)


class ActionDispatcher:
    def __init__(self, settings: Settings, session: requests.Session):
        self.settings = settings
        self.session = session

    def execute_url(self, namespace: str, action: str) -> str:
        return (
            f"{self.settings.api_url}/api/core/v2/namespaces/{quote(namespace, safe='')}"
            f"/checks/{quote(action, safe='')}/execute"
        )

    def dispatch(self, match: MatchResult, namespace: str, authorization: str) -> DispatchResult:
        """
        Asks the backend to execute the matched check on the resolved subscriptions.

        Raises DispatchError for a 404 (no such check in the namespace) or any
        other status >= 300. The request is sent exactly once.
        """
        action = match.action
        url = self.execute_url(namespace, action)
        payload = ExecutionRequest(check=action, subscriptions=match.subscriptions)

        logger.info(f"Requesting the \"{action}\" remediation action on the {match.subscriptions} subscription(s).")
        response = send(
            self.session,
            "POST",
            url,
            timeout=self.settings.REQUEST_TIMEOUT,
            data=payload.model_dump_json(),
            headers={
                "Authorization": authorization,
                "Content-Type": "application/json",
            },
        )

        if response.status_code == 404:
            raise DispatchError(
                f"{response.status_code} {status_text(response)} ({url}); no check named \"{action}\" "
                f"found in namespace \"{namespace}\".",
                action=action,
                namespace=namespace,
                url=url,
                status_code=response.status_code,
            )
        if response.status_code >= 300:
            raise DispatchError(
                f"{response.status_code} {status_text(response)} ({url}); failed to execute \"{action}\".",
                action=action,
                namespace=namespace,
                url=url,
                status_code=response.status_code,
            )

        logger.info(f"Remediation action \"{action}\" accepted ({response.status_code}).")
        return DispatchResult(
            action=action,
            namespace=namespace,
            subscriptions=match.subscriptions,
            url=url,
            status_code=response.status_code,
            body=response.text,
        )
