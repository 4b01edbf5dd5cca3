# remediation_handler/services/http_client.py
import logging
import os
import ssl

import requests

from remediation_handler import __version__
from remediation_handler.core.config import Settings
from remediation_handler.core.exceptions import NetworkError, TLSError

logger = logging.getLogger(__name__)

HEADERS = {"User-Agent": f"sensu-remediation-handler/{__version__}"}


def load_ca_file(path: str) -> str:
    """Checks that the trusted CA file exists and holds loadable PEM certificates."""
    if not os.path.isfile(path):
        raise TLSError(f"failed to read CA file ({path}): no such file")
    try:
        ssl.create_default_context(cafile=path)
    except (ssl.SSLError, OSError) as e:
        raise TLSError(f"failed to load CA file ({path}): {e}") from e
    return path


def build_session(settings: Settings) -> requests.Session:
    """Returns a session for talking to the backend API, trusting SENSU_TRUSTED_CA_FILE when set."""
    session = requests.Session()
    session.headers.update(HEADERS)
    if settings.SENSU_TRUSTED_CA_FILE:
        session.verify = load_ca_file(settings.SENSU_TRUSTED_CA_FILE)
        logger.debug(f"Using trusted CA file: {settings.SENSU_TRUSTED_CA_FILE}")
    return session


def send(session: requests.Session, method: str, url: str, timeout: float, **kwargs) -> requests.Response:
    """Issues one request, translating transport failures into NetworkError / TLSError. No retries."""
    logger.debug(f"{method} {url}")
    try:
        return session.request(method, url, timeout=timeout, **kwargs)
    except requests.exceptions.SSLError as e:
        raise TLSError(f"TLS error calling {method} {url}: {e}", url=url) from e
    except requests.exceptions.Timeout as e:
        raise NetworkError(f"{method} {url} timed out after {timeout}s", url=url) from e
    except requests.exceptions.RequestException as e:
        raise NetworkError(f"{method} {url} failed: {e}", url=url) from e
