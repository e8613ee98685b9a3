import uuid
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

CORRELATION_HEADER = "X-Correlation-ID"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}


def get_correlation_id(request: Request) -> str:
    """Correlation id of the current request, generating one if needed."""
    correlation_id = getattr(request.state, "correlation_id", None)
    if not correlation_id:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
    return correlation_id


def add_cors(app: FastAPI, origins: Optional[List[str]] = None) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER, "Location"],
    )


def add_request_context(app: FastAPI) -> None:
    """Tag every request with a correlation id and add the security headers."""

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        correlation_id = get_correlation_id(request)
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response
