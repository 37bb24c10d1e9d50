import re
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Pattern, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from dailydare.core.exceptions.handler import ErrorResponseBuilder, ServiceErrorCode
from dailydare.infra.config.settings import get_settings
from dailydare.core.logger.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()


def default_endpoint_limits() -> List[Tuple[str, Pattern, int]]:
    """(name, path pattern, requests per minute) for the endpoints that spend currency"""
    return [
        ("reroll", re.compile(r"^/api/v1/dares/[^/]+/reroll$"), settings.RATE_LIMIT_REROLL),
        ("purchase", re.compile(r"^/api/v1/dares/tokens$"), settings.RATE_LIMIT_PURCHASE),
        ("bonus", re.compile(r"^/api/v1/dares/bonus$"), settings.RATE_LIMIT_BONUS),
        ("double_dare", re.compile(r"^/api/v1/feed/[^/]+/double-dare$"), settings.RATE_LIMIT_DOUBLE_DARE),
    ]


class EnhancedRateLimiter:
    """Sliding one-minute window per client and endpoint group, held in memory"""

    def __init__(self, endpoint_limits: Optional[List[Tuple[str, Pattern, int]]] = None, default_limit: Optional[int] = None):
        # endpoint group -> client -> timestamps
        self.endpoint_requests: Dict[str, Dict[str, list]] = {}
        self.endpoint_limits = endpoint_limits if endpoint_limits is not None else default_endpoint_limits()
        self.default_limit = default_limit or settings.RATE_LIMIT_DEFAULT

    def resolve(self, path: str) -> Tuple[str, int]:
        """Map a request path to its limit group; dare ids share one bucket"""
        for name, pattern, limit in self.endpoint_limits:
            if pattern.match(path):
                return name, limit
        return "default", self.default_limit

    def is_rate_limited(self, client: str, endpoint: str, limit: int) -> Tuple[bool, int, datetime]:
        """
        Check if client is rate limited for an endpoint group.
        Returns: (is_limited, current_count, reset_time)
        """
        now = datetime.utcnow()
        requests = self.endpoint_requests.setdefault(endpoint, {})

        # Clean old requests (older than 1 minute)
        if client in requests:
            recent = [ts for ts in requests[client] if now - ts < timedelta(minutes=1)]
            if recent:
                requests[client] = recent
            else:
                del requests[client]

        current_count = len(requests.get(client, []))
        reset_time = now.replace(second=0, microsecond=0) + timedelta(minutes=1)

        return current_count >= limit, current_count, reset_time

    def add_request(self, client: str, endpoint: str):
        self.endpoint_requests.setdefault(endpoint, {}).setdefault(client, []).append(datetime.utcnow())


class EnhancedRateLimitMiddleware(BaseHTTPMiddleware):
    """Per-endpoint rate limiting with the standard error envelope"""

    def __init__(self, app, rate_limiter: Optional[EnhancedRateLimiter] = None):
        super().__init__(app)
        self.rate_limiter = rate_limiter or EnhancedRateLimiter()

    def _get_client_ip(self, request: Request) -> str:
        """Get client IP, handling proxies."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

        return request.client.host if request.client else "unknown"

    def _create_rate_limit_response(self, request: Request, current_count: int, limit: int, reset_time: datetime) -> Response:
        retry_after = 60
        content = ErrorResponseBuilder.build_error_response(
            error_code=ServiceErrorCode.RATE_LIMIT_EXCEEDED,
            message=f"Rate limit exceeded. Maximum {limit} requests per minute.",
            status_code=429,
            details={
                "limit": limit,
                "current": current_count,
                "retry_after": retry_after,
            },
            request_id=request.headers.get("X-Request-ID")
        )

        response = JSONResponse(content=content, status_code=429)
        response.headers["Retry-After"] = str(retry_after)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = "0"
        response.headers["X-RateLimit-Reset"] = str(int(reset_time.timestamp()))
        return response

    async def dispatch(self, request: Request, call_next) -> Response:
        # Skip rate limiting for CORS preflight requests and health checks
        if request.method == "OPTIONS" or request.url.path in ["/api/v1/health", "/docs", "/redoc", "/openapi.json"]:
            return await call_next(request)

        client = self._get_client_ip(request)
        endpoint, limit = self.rate_limiter.resolve(request.url.path)

        is_limited, current_count, reset_time = self.rate_limiter.is_rate_limited(client, endpoint, limit)
        if is_limited:
            logger.warning(
                "Rate limit exceeded",
                extra={"client_ip": client, "endpoint": endpoint, "path": request.url.path, "limit": limit}
            )
            return self._create_rate_limit_response(request, current_count, limit, reset_time)

        self.rate_limiter.add_request(client, endpoint)

        response = await call_next(request)

        if response.status_code < 400:
            response.headers["X-RateLimit-Limit"] = str(limit)
            response.headers["X-RateLimit-Remaining"] = str(max(0, limit - current_count - 1))
            response.headers["X-RateLimit-Reset"] = str(int(reset_time.timestamp()))

        return response
