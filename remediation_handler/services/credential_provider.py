# remediation_handler/services/credential_provider.py
import logging
from http import HTTPStatus

import requests
from pydantic import ValidationError

from remediation_handler.core.config import Settings
from remediation_handler.core.exceptions import AuthenticationError, ConfigurationError
from remediation_handler.models.remediation import AccessToken
from remediation_handler.services.http_client import send

logger = logging.getLogger(__name__)


def status_text(response: requests.Response) -> str:
    if response.reason:
        return response.reason
    try:
        return HTTPStatus(response.status_code).phrase
    except ValueError:
        return ""


class CredentialProvider:
    """
    Supplies the Authorization header for API calls.

    With SENSU_API_KEY set the key is sent as-is ("Key <value>"). Otherwise the
    configured user and password are exchanged for an access token at GET /auth
    on every call; tokens are never cached or refreshed.
    """

    def __init__(self, settings: Settings, session: requests.Session):
        self.settings = settings
        self.session = session

    def authorization_header(self) -> str:
        if self.settings.uses_api_key:
            logger.debug("Using API key authentication.")
            return f"Key {self.settings.SENSU_API_KEY.get_secret_value()}"
        if self.settings.has_user_credentials:
            token = self.fetch_access_token()
            return f"Bearer {token.access_token}"
        raise ConfigurationError("no API key or user credentials configured")

    def fetch_access_token(self) -> AccessToken:
        url = f"{self.settings.api_url}/auth"
        logger.info(f"Requesting an access token for user '{self.settings.SENSU_API_USER}'.")
        response = send(
            self.session,
            "GET",
            url,
            timeout=self.settings.REQUEST_TIMEOUT,
            auth=(self.settings.SENSU_API_USER, self.settings.SENSU_API_PASSWORD.get_secret_value()),
        )

        if response.status_code == 401:
            raise AuthenticationError(
                f"{response.status_code} {status_text(response)} ({url}); invalid credentials for user "
                f"\"{self.settings.SENSU_API_USER}\".",
                url=url,
                status_code=response.status_code,
            )
        if not 200 <= response.status_code < 300:
            raise AuthenticationError(
                f"{response.status_code} {status_text(response)} ({url}); authentication failed.",
                url=url,
                status_code=response.status_code,
            )

        try:
            token = AccessToken.model_validate_json(response.text)
        except ValidationError as e:
            raise AuthenticationError(
                f"unexpected response from {url}: {e}", url=url, status_code=response.status_code
            ) from e
        logger.debug(f"Access token obtained (expires at {token.expires_at}).")
        return token
