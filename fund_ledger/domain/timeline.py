"""Stage timeline events recorded during a dashboard computation pass."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
    started_at_utc: datetime | None = None,
) -> dict[str, object]:
    """Build one structured timeline event payload.

    Args:
        stage: Stage name (`ledger`, `prices`, `valuation`).
        status: Stage status marker (`started`, `completed`, `skipped`, `degraded`).
        details: Optional structured details object.
        started_at_utc: When the stage began; adds `elapsed_ms` to the event.

    Returns:
        dict[str, object]: Structured timeline event.
    """

    recorded_at = datetime.now(timezone.utc)
    event_payload: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": recorded_at.isoformat(),
    }
    if started_at_utc is not None:
        event_payload["elapsed_ms"] = round((recorded_at - started_at_utc).total_seconds() * 1000, 3)
    if details is not None:
        event_payload["details"] = details
    return event_payload


def domain_utc_now() -> datetime:
    """Return the current offset-aware UTC time."""

    return datetime.now(timezone.utc)
