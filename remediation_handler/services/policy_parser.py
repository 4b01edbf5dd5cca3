# remediation_handler/services/policy_parser.py
import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from remediation_handler.core.exceptions import PolicyDecodeError
from remediation_handler.models.event import Event
from remediation_handler.models.remediation import RemediationPolicyEntry

logger = logging.getLogger(__name__)

_policy_adapter = TypeAdapter(Optional[List[RemediationPolicyEntry]])


def parse_policy(event: Event, annotation_key: str) -> Optional[List[RemediationPolicyEntry]]:
    """
    Decodes the remediation actions annotation of the event's check.

    Returns None when the annotation is missing or blank (no policy configured).
    Raises PolicyDecodeError when the annotation is present but not a JSON
    array of remediation actions.
    """
    raw = event.annotation(annotation_key)
    if raw is None or not raw.strip():
        logger.info(f"Check '{event.check_name}' has no '{annotation_key}' annotation; no remediation configured.")
        return None

    try:
        entries = _policy_adapter.validate_json(raw)
    except ValidationError as e:
        raise PolicyDecodeError(
            f"invalid remediation actions in annotation '{annotation_key}' of check '{event.check_name}': {e}"
        ) from e

    entries = entries or []  # a literal JSON null carries no actions
    logger.debug(f"Parsed {len(entries)} remediation action(s) for check '{event.check_name}'.")
    return entries
