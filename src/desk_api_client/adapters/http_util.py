"""Shared HTTP client utilities (timeouts, URL building)."""

from __future__ import annotations

import httpx

API_BASE_PATH = "/api/v2/"


def timeouts_for(seconds: float) -> httpx.Timeout:
    """Build httpx.Timeout with bounded connect/pool for fail-fast on unreachable upstreams."""
    total = float(seconds)
    connect = min(5.0, total)
    return httpx.Timeout(connect=connect, read=total, write=total, pool=connect)


def build_url(hostname: str, path: str) -> str:
    """
    Join a Desk hostname and a path into an absolute URL.

    `hostname` may be a bare host ("acme.desk.com") or carry its own scheme;
    bare hosts are always addressed over https.
    """
    host = hostname.strip().rstrip("/")
    if "://" not in host:
        host = f"https://{host}"
    return f"{host}/{path.lstrip('/')}"
