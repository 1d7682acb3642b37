#!/usr/bin/env python3
# ==============================================================================
# [FILE] functions/http.py
# [PROJECT] ChannelAtlas
# [ROLE] Single HTTP GET attempt with a typed outcome (never raises)
# [VERSION] v1.1
# [UPDATED] 2026-10-17
# ==============================================================================

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

DEFAULT_USER_AGENT = "Mozilla/5.0"
DEFAULT_ACCEPT = "text/plain,application/x-mpegURL,application/json"


class AttemptStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    SOFT_FAIL = "soft_fail"


@dataclass(frozen=True)
class FetchAttempt:
    status: AttemptStatus
    body: str = ""
    reason: str = ""
    http_status: Optional[int] = None


def build_headers(user_agent: str = None, accept: str = None) -> dict:
    return {
        "User-Agent": user_agent or DEFAULT_USER_AGENT,
        "Accept": accept or DEFAULT_ACCEPT,
    }


def get_source(session, url: str, headers: dict, timeout_sec: float) -> FetchAttempt:
    """
    Returns a FetchAttempt. 404 is NOT_FOUND; other HTTP errors and transport
    failures are SOFT_FAIL.
    """
    try:
        r = session.get(url, headers=headers, timeout=timeout_sec)
    except requests.Timeout:
        return FetchAttempt(AttemptStatus.SOFT_FAIL, reason="timeout")
    except requests.RequestException as e:
        return FetchAttempt(AttemptStatus.SOFT_FAIL, reason=f"exc={type(e).__name__}: {e}")

    if r.status_code == 404:
        return FetchAttempt(AttemptStatus.NOT_FOUND, reason="http=404", http_status=404)
    if r.status_code >= 400:
        return FetchAttempt(AttemptStatus.SOFT_FAIL, reason=f"http={r.status_code}", http_status=r.status_code)
    return FetchAttempt(AttemptStatus.OK, body=r.text or "", reason="ok", http_status=r.status_code)
