"""Shared HTTP plumbing for the provider clients.

Sessions come from ``requests`` with optional ``requests_cache`` (in-memory
backend) and ``retry_requests`` layers. ``get_json`` maps transport errors and
status codes onto the provider failure taxonomy.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

import requests
import requests_cache
from retry_requests import retry

from floodrisk.errors import PermanentProviderFailure, TransientProviderFailure
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="data_sources/http")

TRANSIENT_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})
CREDENTIAL_STATUS_CODES = frozenset({401, 403})


def build_session(
    *,
    cache_name: str | None = None,
    expire_after: int | float | None = None,
    retries: int = 0,
    backoff_factor: float = 0.2,
    user_agent: str | None = None,
) -> requests.Session:
    """Build a session, cached in memory when ``expire_after`` is set and retrying when ``retries`` > 0."""
    if expire_after:
        session: requests.Session = requests_cache.CachedSession(
            cache_name or "floodrisk_http",
            backend="memory",
            expire_after=expire_after,
        )
    else:
        session = requests.Session()
    if retries > 0:
        session = retry(session, retries=retries, backoff_factor=backoff_factor)
    if user_agent:
        session.headers.update({"User-Agent": user_agent})
    return session


def get_json(
    session,
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = 10,
    source: str,
) -> Any:
    """GET ``url`` and decode JSON, raising Transient/PermanentProviderFailure on any problem."""
    try:
        resp = session.get(url, params=params, headers=headers, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        raise TransientProviderFailure(f"request failed: {exc}", source=source) from exc

    status = resp.status_code
    if status != 200:
        body = (getattr(resp, "text", "") or "")[:200]
        logger.warning(
            "Provider returned non-success status",
            extra={"source": source, "status": status, "url": mask_url(getattr(resp, "url", url) or url)},
        )
        if status in TRANSIENT_STATUS_CODES or status >= 500:
            raise TransientProviderFailure(f"HTTP {status}: {body}", source=source)
        if status in CREDENTIAL_STATUS_CODES:
            raise PermanentProviderFailure(f"credential rejected (HTTP {status})", source=source)
        raise PermanentProviderFailure(f"HTTP {status}: {body}", source=source)

    try:
        return resp.json()
    except ValueError as exc:
        raise PermanentProviderFailure(f"malformed JSON payload: {exc}", source=source) from exc


NO_DATA_FLOOR = -100000.0  # ArcGIS image services report NoData as large negatives


def coerce_float(value: Any) -> Optional[float]:
    """Convert provider values ("12.3", 12, "NoData", None) to float or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number <= NO_DATA_FLOOR:  # NaN or NoData sentinel
        return None
    return number
