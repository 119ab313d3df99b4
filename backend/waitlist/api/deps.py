"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import io
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request, send_file
from flask_jwt_extended import get_jwt, verify_jwt_in_request

from waitlist.core.errors import Forbidden
from waitlist.infra import Collaborators, get_collaborators
from waitlist.services import (
    AdmissionService,
    BaseService,
    CertificateSweepService,
    RenderedDocument,
    WaitlistQueryService,
)
from waitlist.services._shared.errors import ServiceError

F = TypeVar("F", bound=Callable[..., Any])


def require_scope(required: str) -> Callable[[F], F]:
    """Ensure the verified JWT contains the requested scope claim."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            verify_jwt_in_request(optional=False)
            claims = get_jwt() or {}
            scopes = set(claims.get("scopes", []))
            if required not in scopes:
                raise Forbidden("Insufficient scope")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def translate_service_errors(func: F) -> F:
    """Re-raise service-layer errors as API errors (RFC 7807 responses)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            return func(*args, **kwargs)
        except ServiceError as exc:
            raise BaseService().translate_exceptions(exc) from exc

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def pdf_response(document: RenderedDocument) -> Response:
    """Stream a rendered document as a download."""

    return send_file(
        io.BytesIO(document.content),
        mimetype=document.mimetype,
        as_attachment=True,
        download_name=document.filename,
    )


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ------------------------------ Service builders ------------------------------


def collaborators() -> Collaborators:
    return get_collaborators(current_app)


def admission_service() -> AdmissionService:
    deps = collaborators()
    return AdmissionService(
        renderer=deps.renderer,
        notifier=deps.notifier,
        photo_store=deps.photo_store,
        settings=deps.settings,
        clock=deps.clock,
    )


def query_service() -> WaitlistQueryService:
    deps = collaborators()
    return WaitlistQueryService(
        renderer=deps.renderer,
        photo_store=deps.photo_store,
        settings=deps.settings,
        clock=deps.clock,
    )


def sweep_service() -> CertificateSweepService:
    deps = collaborators()
    return CertificateSweepService(
        renderer=deps.renderer,
        notifier=deps.notifier,
        settings=deps.settings,
        clock=deps.clock,
    )
