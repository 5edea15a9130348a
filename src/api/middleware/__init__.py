from .csrf import CSRFGuardMiddleware, is_request_origin_trusted

__all__ = ["CSRFGuardMiddleware", "is_request_origin_trusted"]
