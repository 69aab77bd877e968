from quizhub.middleware.logging_middleware import LoggingMiddleware
from quizhub.middleware.request_id import RequestIDMiddleware

__all__ = ["LoggingMiddleware", "RequestIDMiddleware"]
