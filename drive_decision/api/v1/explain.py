"""POST /v1/explain - plain-language explanation of a decision result"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request

from drive_decision.api.v1.schemas import ExplainRequest, ExplainResponse
from drive_decision.api.dependencies import get_narrator_client, get_request_id
from drive_decision.config import settings
from drive_decision.domain.allowlist import passes_number_allowlist
from drive_decision.domain.exceptions import NarratorError
from drive_decision.domain.narrative import (
    build_deterministic_explanation,
    build_explain_payload,
    validate_explain_response_shape,
)
from drive_decision.domain.prompts import SYSTEM_PROMPT, build_user_prompt
from drive_decision.infrastructure.clients.narrator import NarratorClient
from drive_decision.infrastructure.observability.logging import log_explanation
from drive_decision.infrastructure.observability.metrics import (
    allowlist_rejection_counter,
    record_explanation,
)

router = APIRouter()


@router.post("/explain", response_model=ExplainResponse)
async def explain_decision(
    request_body: ExplainRequest,
    request: Request,
    narrator: NarratorClient = Depends(get_narrator_client),
):
    """
    Explain a decision result.

    The generated narrative is only served when AI is requested and enabled,
    the narrator answers, the answer matches the narrative contract and every
    number in it is on the result's allowlist. Anything else falls back to
    the deterministic template.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    result = request_body.result.to_domain()
    buy = request_body.buy.to_domain() if request_body.buy else None
    lease = request_body.lease.to_domain() if request_body.lease else None
    risk_tolerance = request_body.user.risk_tolerance if request_body.user else None

    payload = build_explain_payload(result, buy, lease, risk_tolerance)
    context = payload["context"]

    fallback_reason: Optional[str] = None
    if request_body.use_ai and not settings.narrator_enabled:
        fallback_reason = "ai_disabled"
    elif request_body.use_ai:
        try:
            narrative = await narrator.generate(
                SYSTEM_PROMPT,
                build_user_prompt(request_body.verbosity, payload),
            )
        except NarratorError as e:
            fallback_reason = "narrator_error"
            logging.warning(f"Narrator failed: {e}", extra={"request_id": request_id})
        else:
            if not validate_explain_response_shape(narrative):
                fallback_reason = "malformed_shape"
                logging.warning("Narrator returned malformed shape", extra={"request_id": request_id})
            else:
                check = passes_number_allowlist(narrative, result, context)
                if check.ok:
                    record_explanation("ai", None)
                    log_explanation(request_id, "ai", None, (time.time() - start_time) * 1000)
                    return ExplainResponse(
                        headline=narrative["headline"],
                        explanation=narrative["explanation"],
                        source="ai",
                    )

                fallback_reason = "allowlist_violation"
                allowlist_rejection_counter.inc()
                logging.warning(
                    check.reason,
                    extra={"request_id": request_id, "offending": list(check.offending)},
                )

    narrative = build_deterministic_explanation(result, context, request_body.verbosity)

    record_explanation("deterministic", fallback_reason)
    log_explanation(request_id, "deterministic", fallback_reason, (time.time() - start_time) * 1000)

    return ExplainResponse(
        headline=narrative["headline"],
        explanation=narrative["explanation"],
        source="deterministic",
    )
