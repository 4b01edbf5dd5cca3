import pytest
import requests

from remediation_handler.core.config import Settings
from remediation_handler.core.exceptions import AuthenticationError, ConfigurationError, NetworkError
from remediation_handler.services.credential_provider import CredentialProvider

from conftest import API_URL, FakeSession, make_response

AUTH_URL = f"{API_URL}/auth"
TOKEN = {"access_token": "eyJhbGciOi.token", "refresh_token": "refresh", "expires_at": 1700000900}


def test_api_key_is_used_verbatim_without_network(key_settings):
    session = FakeSession()
    assert CredentialProvider(key_settings, session).authorization_header() == "Key secret-key"
    assert session.calls == []


def test_api_key_wins_over_user_credentials():
    settings = Settings(_env_file=None, SENSU_API_URL=API_URL, SENSU_API_KEY="k", SENSU_API_USER="u", SENSU_API_PASSWORD="p")
    session = FakeSession()
    assert CredentialProvider(settings, session).authorization_header() == "Key k"
    assert session.calls == []


def test_user_credentials_are_exchanged_for_a_bearer_token(user_settings):
    session = FakeSession({("GET", AUTH_URL): make_response(200, TOKEN)})

    header = CredentialProvider(user_settings, session).authorization_header()

    assert header == "Bearer eyJhbGciOi.token"
    call = session.calls[0]
    assert call["auth"] == ("admin", "P@ssw0rd!")
    assert call["timeout"] == user_settings.REQUEST_TIMEOUT


def test_every_call_performs_a_fresh_exchange(user_settings):
    session = FakeSession({("GET", AUTH_URL): make_response(200, TOKEN)})
    provider = CredentialProvider(user_settings, session)
    provider.authorization_header()
    provider.authorization_header()
    assert len(session.calls) == 2


def test_unauthorized_means_invalid_credentials(user_settings):
    session = FakeSession({("GET", AUTH_URL): make_response(401, "Unauthorized", reason="Unauthorized")})

    with pytest.raises(AuthenticationError) as excinfo:
        CredentialProvider(user_settings, session).authorization_header()

    assert excinfo.value.status_code == 401
    assert excinfo.value.url == AUTH_URL
    assert "invalid credentials" in str(excinfo.value)


def test_other_error_status_is_an_authentication_error(user_settings):
    session = FakeSession({("GET", AUTH_URL): make_response(500, "boom")})

    with pytest.raises(AuthenticationError) as excinfo:
        CredentialProvider(user_settings, session).authorization_header()

    assert excinfo.value.status_code == 500
    assert "500 Internal Server Error" in str(excinfo.value)


def test_token_document_without_access_token_is_rejected(user_settings):
    session = FakeSession({("GET", AUTH_URL): make_response(200, {"expires_at": 1})})
    with pytest.raises(AuthenticationError):
        CredentialProvider(user_settings, session).authorization_header()


def test_connection_failure_is_a_network_error(user_settings):
    session = FakeSession({("GET", AUTH_URL): requests.exceptions.ConnectionError("connection refused")})
    with pytest.raises(NetworkError) as excinfo:
        CredentialProvider(user_settings, session).authorization_header()
    assert excinfo.value.url == AUTH_URL


def test_no_credentials_is_a_configuration_error():
    settings = Settings(_env_file=None, SENSU_API_URL=API_URL)
    with pytest.raises(ConfigurationError):
        CredentialProvider(settings, FakeSession()).authorization_header()
