"""Client IP resolution for FastAPI requests."""

from __future__ import annotations

from fastapi import Request

# Proxy headers in priority order: Cloudflare, Akamai, standard proxies, nginx
_CLIENT_IP_HEADERS: tuple[str, ...] = (
    "CF-Connecting-IP",
    "True-Client-IP",
    "X-Forwarded-For",
    "X-Real-IP",
)


def get_client_ip(request: Request) -> str:
    """Return the real client IP, or ``""`` if none can be found.

    Only the first address of a comma-separated ``X-Forwarded-For`` is used.
    """
    for header in _CLIENT_IP_HEADERS:
        ip_value = request.headers.get(header)
        if ip_value:
            client_ip = ip_value.split(",")[0].strip()
            if client_ip:
                return client_ip

    return request.client.host if request.client else ""
