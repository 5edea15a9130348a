"""
CSRF Guard

Rejects cross-site state-changing requests by checking that Origin (or, when
a browser omits it, Referer) names the host the request was sent to. Runs
before routing; rejected requests never reach a handler.
"""

import logging
from typing import Callable, Iterable, Mapping, Optional, Set, Union
from urllib.parse import urlsplit

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def _url_host(url: str) -> Optional[str]:
    """host[:port] of an absolute http(s) URL, None when it is not one"""
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None
    return parts.netloc.lower()


def trusted_host(headers: Mapping[str, str], trust_proxy: bool) -> Optional[str]:
    host = None
    if trust_proxy:
        forwarded = headers.get("x-forwarded-host")
        if forwarded:
            # First hop when a chain of proxies appended values
            host = forwarded.split(",")[0].strip()
    if not host:
        host = headers.get("host")
    return host.lower() if host else None


def is_request_origin_trusted(
    method: str, headers: Mapping[str, str], trust_proxy: bool = False
) -> bool:
    """
    Decide whether a request may proceed.

    Safe methods always pass. Otherwise Origin must match the trusted host;
    without Origin, Referer must match it; with neither, the request fails.
    """
    if method.upper() in SAFE_METHODS:
        return True

    host = trusted_host(headers, trust_proxy)
    if not host:
        return False

    origin = headers.get("origin")
    if origin:
        return _url_host(origin) == host

    referer = headers.get("referer")
    if referer:
        return _url_host(referer) == host

    return False


def _normalize_paths(paths: Union[str, Iterable[str], None]) -> Set[str]:
    if not paths:
        return set()
    if isinstance(paths, str):
        paths = paths.split(",")
    return {p.strip() for p in paths if p.strip()}


class CSRFGuardMiddleware(BaseHTTPMiddleware):
    """
    Origin-header CSRF protection.

    Exempt paths ending with "/" match as prefixes, others exactly.
    """

    def __init__(
        self,
        app,
        trust_proxy: bool = False,
        exempt_paths: Union[str, Iterable[str], None] = None,
    ):
        super().__init__(app)
        self.trust_proxy = trust_proxy
        self.exempt_paths = _normalize_paths(exempt_paths)

    def _is_exempt(self, path: str) -> bool:
        for exempt_path in self.exempt_paths:
            if exempt_path.endswith("/"):
                if path.startswith(exempt_path) or path == exempt_path.rstrip("/"):
                    return True
            elif path == exempt_path:
                return True
        return False

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method in SAFE_METHODS or self._is_exempt(request.url.path):
            return await call_next(request)

        if not is_request_origin_trusted(request.method, request.headers, self.trust_proxy):
            logger.warning(
                f"[CSRF] Rejected {request.method} {request.url.path} | "
                f"origin={request.headers.get('origin')} | "
                f"referer={request.headers.get('referer')} | "
                f"host={trusted_host(request.headers, self.trust_proxy)}"
            )
            return Response(status_code=403)

        return await call_next(request)
