# remediation_handler/api/v1/endpoints/remediation.py
import logging
import time
from fastapi import APIRouter, Depends, Request
from remediation_handler.models.event import Event
from remediation_handler.models.remediation import RemediationOutcome
from remediation_handler.services.remediation_service import RemediationService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_remediation_service(request: Request) -> RemediationService:
    """Builds the service from the settings the app was created with."""
    return RemediationService(request.app.state.settings)


@router.post(
    "/events",
    response_model=RemediationOutcome,
    summary="Handle a Sensu event",
    description="""
Receives a Sensu event, evaluates the remediation actions annotated on its check and,
when the first matching action is found, asks the Sensu API to execute it on the
resolved subscriptions. Events without a policy or without a matching action are
acknowledged with status `no_policy` / `no_match`.
    """,
)
def handle_event(
    event: Event,
    service: RemediationService = Depends(get_remediation_service),
) -> RemediationOutcome:
    start_time_ns = time.perf_counter_ns()
    logger.info(f"Received event for check '{event.check_name}' on entity '{event.entity_name}'")

    # Errors propagate to the handlers registered in main.py
    outcome = service.process_event(event)

    duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
    logger.info(f"Processed event for check '{event.check_name}' in {duration_ms:.2f} ms. Outcome: {outcome.status}")
    return outcome
