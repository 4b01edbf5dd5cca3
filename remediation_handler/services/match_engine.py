# remediation_handler/services/match_engine.py
import logging
from typing import Optional, Sequence

from remediation_handler.models.event import Event
from remediation_handler.models.remediation import MatchResult, RemediationPolicyEntry

logger = logging.getLogger(__name__)


def resolve_subscriptions(entry: RemediationPolicyEntry, event: Event) -> list[str]:
    if entry.subscriptions:
        return list(entry.subscriptions)
    return [f"entity:{event.entity_name}"]


def match_action(entries: Sequence[RemediationPolicyEntry], event: Event) -> Optional[MatchResult]:
    """
    Selects the remediation action to run for this event.

    Entries are evaluated in document order and the first one whose severities
    contain the check status and whose occurrences contain the occurrence count
    wins; the remaining entries are not evaluated. Returns None when no entry
    matches.
    """
    status = event.check.status
    occurrences = event.check.occurrences

    for entry in entries:
        if status not in entry.severities:
            logger.info(
                f"Remediation action \"{entry.request}\" configured to trigger on severities: {entry.severities} "
                f"(nothing to do for severity {status})."
            )
            continue
        if occurrences not in entry.occurrences:
            logger.info(
                f"Remediation action \"{entry.request}\" configured to trigger on occurrence(s): {entry.occurrences} "
                f"(nothing to do on occurrence #{occurrences})."
            )
            continue

        subscriptions = resolve_subscriptions(entry, event)
        logger.info(f"Remediation action \"{entry.request}\" matched severity {status} on occurrence #{occurrences}.")
        return MatchResult(entry=entry, subscriptions=subscriptions)

    return None
