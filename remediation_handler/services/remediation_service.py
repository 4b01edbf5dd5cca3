# remediation_handler/services/remediation_service.py
import logging
from typing import Optional

import requests

from remediation_handler.core.config import Settings
from remediation_handler.models.event import Event
from remediation_handler.models.remediation import RemediationOutcome
from remediation_handler.services.credential_provider import CredentialProvider
from remediation_handler.services.dispatcher import ActionDispatcher
from remediation_handler.services.http_client import build_session
from remediation_handler.services.match_engine import match_action
from remediation_handler.services.policy_parser import parse_policy

logger = logging.getLogger(__name__)


class RemediationService:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self._session = session

    def process_event(self, event: Event) -> RemediationOutcome:
        """
        Parses the check's remediation actions, picks the first matching one and
        asks the backend to execute it.

        "No policy" and "no match" are normal outcomes. Every failure is raised
        as a RemediationError subclass for the caller to report.
        """
        logger.info(
            f"Processing event for check '{event.check_name}' on entity '{event.entity_name}' "
            f"(namespace: {event.namespace}, status: {event.check.status}, occurrences: {event.check.occurrences})"
        )
        outcome = dict(check_name=event.check_name, entity_name=event.entity_name, namespace=event.namespace)

        entries = parse_policy(event, self.settings.SENSU_REMEDIATION_ANNOTATION)
        if entries is None:
            return RemediationOutcome(status="no_policy", **outcome)

        match = match_action(entries, event)
        if match is None:
            logger.info(f"No remediation action matched for check '{event.check_name}'. Nothing to do.")
            return RemediationOutcome(status="no_match", **outcome)

        self.settings.validate_api_access()
        session = self._session if self._session is not None else build_session(self.settings)
        try:
            authorization = CredentialProvider(self.settings, session).authorization_header()
            result = ActionDispatcher(self.settings, session).dispatch(match, event.namespace, authorization)
        finally:
            if session is not self._session:
                session.close()

        return RemediationOutcome(status="dispatched", dispatch=result, **outcome)
