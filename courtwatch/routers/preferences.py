"""
Preference submission – the write side of user subscriptions.

A submission replaces everything previously stored for that email and
sends a best-effort confirmation listing the chosen slots.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from courtwatch import db
from courtwatch.models import PreferenceSubmission, PreferenceSubmissionResult
from courtwatch.services.canonical import normalize_time
from courtwatch.services.email import send_email
from courtwatch.services.notifier import CONFIRMATION_SUBJECT, build_confirmation_html

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["preferences"])


@router.post(
    "/preferences",
    response_model=PreferenceSubmissionResult,
    operation_id="submitPreferences",
    summary="Replace all court alerts for an email address",
)
async def submit_preferences(body: PreferenceSubmission) -> PreferenceSubmissionResult:
    rows: list[tuple[str, str, str]] = []
    for selection in body.selections:
        start = normalize_time(selection.start_time)
        if start is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Invalid start time: {selection.start_time}",
            )
        rows.append((selection.date.isoformat(), start, selection.location))

    count = await db.replace_preferences(body.email, rows)
    logger.info("Stored %d preferences for %s", count, body.email)

    # The preferences are stored either way; a failed receipt is only logged
    try:
        await send_email(body.email, CONFIRMATION_SUBJECT, build_confirmation_html(rows))
    except Exception:
        logger.exception("❌ Error sending confirmation email to %s", body.email)

    return PreferenceSubmissionResult(success=True, email=body.email, count=count)
