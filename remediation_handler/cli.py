# remediation_handler/cli.py
import argparse
import logging
import sys
from typing import IO, List, Optional

from pydantic import ValidationError

from remediation_handler import __version__
from remediation_handler.core.config import DEFAULT_ANNOTATION, Settings, load_settings
from remediation_handler.core.exceptions import EventDecodeError, RemediationError
from remediation_handler.core.logging_config import setup_logging
from remediation_handler.models.event import Event
from remediation_handler.services.remediation_service import RemediationService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="remediation-handler",
        description="Sensu handler for triggering automated remediations (playbooks). "
                    "Reads one event from stdin.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-a", "--annotation", dest="SENSU_REMEDIATION_ANNOTATION",
                   help=f"Remediation actions annotation (defaults to $SENSU_REMEDIATION_ANNOTATION or {DEFAULT_ANNOTATION})")
    p.add_argument("--sensu-api-url", dest="SENSU_API_URL", help="Sensu API URL (defaults to $SENSU_API_URL)")
    p.add_argument("--sensu-api-key", dest="SENSU_API_KEY", help="Sensu API Key (defaults to $SENSU_API_KEY)")
    p.add_argument("--sensu-api-user", dest="SENSU_API_USER", help="Sensu API user (defaults to $SENSU_API_USER)")
    p.add_argument("--sensu-api-password", dest="SENSU_API_PASSWORD", help="Sensu API password (defaults to $SENSU_API_PASSWORD)")
    p.add_argument("--sensu-trusted-ca-file", dest="SENSU_TRUSTED_CA_FILE",
                   help="Sensu API Trusted Certificate Authority File (defaults to $SENSU_TRUSTED_CA_FILE)")
    p.add_argument("--timeout", dest="REQUEST_TIMEOUT", type=float, help="API request timeout in seconds (defaults to $REQUEST_TIMEOUT or 10)")
    p.add_argument("--log-level", dest="LOG_LEVEL", help="Log level (defaults to $LOG_LEVEL or INFO)")
    p.add_argument("--event-file", help="Read the event from this file instead of stdin")
    p.add_argument("--serve", action="store_true", help="Run the HTTP handler endpoint instead of reading one event")
    p.add_argument("--host", default="0.0.0.0")
    p.add_argument("--port", type=int, default=8000)
    return p


def read_event(stream: IO[str]) -> Event:
    raw = stream.read()
    if not raw.strip():
        raise EventDecodeError("no event data on stdin")
    try:
        return Event.model_validate_json(raw)
    except ValidationError as e:
        raise EventDecodeError(f"failed to decode event: {e}") from e


def read_event_file(path: str) -> Event:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return read_event(f)
    except OSError as e:
        raise EventDecodeError(f"failed to read event file ({path}): {e}") from e


def serve(settings: Settings, host: str, port: int):
    import uvicorn
    from remediation_handler.main import create_app

    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.LOG_LEVEL.lower())


def main(argv: Optional[List[str]] = None, stdin: Optional[IO[str]] = None, stdout: Optional[IO[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    overrides = {
        key: getattr(args, key)
        for key in (
            "SENSU_REMEDIATION_ANNOTATION", "SENSU_API_URL", "SENSU_API_KEY", "SENSU_API_USER",
            "SENSU_API_PASSWORD", "SENSU_TRUSTED_CA_FILE", "REQUEST_TIMEOUT", "LOG_LEVEL",
        )
    }

    try:
        settings = load_settings(**overrides)
        setup_logging(settings.LOG_LEVEL)
        settings.validate_api_access()

        if args.serve:
            serve(settings, args.host, args.port)
            return 0

        event = read_event_file(args.event_file) if args.event_file else read_event(stdin)
        outcome = RemediationService(settings).process_event(event)
    except RemediationError as e:
        if not logging.getLogger().handlers:
            setup_logging()
        logger.error(f"ERROR: {e}")
        return 1

    if outcome.dispatch is not None:
        print(outcome.dispatch.status_code, file=stdout)
        print(outcome.dispatch.body, file=stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
