"""HTTP health check capability — GET an endpoint and decode its health payload.

The payload is the one served by ``src.probing.handler``:

    {"OK": true, "Now": "2025-01-01T00:00:00+00:00"}

``http_check`` returns ``(ok, now)`` or raises CheckError. The monitor treats
both an exception and ``ok == False`` as a single failed check.
"""

from __future__ import annotations

import logging
from datetime import datetime

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.config import settings

logger = logging.getLogger(__name__)


class CheckError(Exception):
    """Raised when a health endpoint can't be reached or decoded."""


class HealthPayload(BaseModel):
    """Health body reported by a probed process."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = Field(alias="OK")
    now: datetime = Field(alias="Now")


def http_check(endpoint: str, timeout: float | None = None) -> tuple[bool, datetime]:
    """GET ``endpoint`` and return (healthy, remote timestamp)."""
    try:
        with httpx.Client(timeout=timeout or settings.probe_check_timeout) as client:
            resp = client.get(endpoint)
    except httpx.TimeoutException as e:
        raise CheckError(f"Health request timed out: {endpoint}") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise CheckError(f"Health request failed: {type(e).__name__}: {e}") from e

    if not resp.is_success:
        raise CheckError(f"Unexpected status {resp.status_code} from {endpoint}")

    try:
        payload = HealthPayload.model_validate(resp.json())
    except (ValueError, ValidationError) as e:
        raise CheckError(f"Malformed health payload from {endpoint}: {e}") from e

    return payload.ok, payload.now
