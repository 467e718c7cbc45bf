"""HTTP surface for payment records."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from time import perf_counter
from uuid import uuid4

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from paysvc.common.config import settings
from paysvc.common.db import SessionLocal, create_schema
from paysvc.common.logging import configure_logging, logger, route_ctx, trace_id_ctx
from paysvc.common.metrics import http_request_duration_seconds, http_requests_total, metrics_response
from paysvc.common.startup import log_startup_config
from paysvc.common.tracing import setup_tracing
from paysvc.services.payment.errors import FieldError, NotFoundError, ValidationError
from paysvc.services.payment.models import PaymentStatus
from paysvc.services.payment.schemas import CreatePaymentRequest, ErrorResponse, PaymentResponse
from paysvc.services.payment.service import PaymentService
from paysvc.services.payment.store import SqlAlchemyPaymentStore

configure_logging()
log_startup_config(
    settings,
    [
        "service_name",
        "database_url",
        "db_auto_create",
        "tracing_enabled",
        "enforce_status_transitions",
    ],
)
service = PaymentService(
    SqlAlchemyPaymentStore(SessionLocal),
    enforce_transitions=settings.enforce_status_transitions,
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Create tables on startup when running without migrations."""

    if settings.db_auto_create:
        create_schema()
    yield


app = FastAPI(title="Payment Service", lifespan=lifespan)
setup_tracing(app)


def get_payment_service() -> PaymentService:
    return service


@app.middleware("http")
async def trace_and_metrics_middleware(request: Request, call_next):
    """Bind a trace id and record request count and latency for every call."""

    trace_id = request.headers.get("x-trace-id") or str(uuid4())
    token = trace_id_ctx.set(trace_id)
    route_token = route_ctx.set(request.url.path)
    start = perf_counter()
    route = request.url.path
    method = request.method
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        route_obj = request.scope.get("route")
        if route_obj is not None and getattr(route_obj, "path", None):
            route = route_obj.path
        response.headers["x-trace-id"] = trace_id
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()
        route_ctx.reset(route_token)
        trace_id_ctx.reset(token)


def error_response(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(status=status_code, message=message, timestamp=datetime.now(timezone.utc))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(NotFoundError)
async def handle_not_found(_: Request, exc: NotFoundError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(ValidationError)
async def handle_validation_error(_: Request, exc: ValidationError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, f"Validation failed: {exc.description}")


def _field_name(loc) -> str:
    # ("body", "amount") -> "amount"; ("query", "status") -> "status"
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = ", ".join(f"{_field_name(error['loc'])}: {error['msg']}" for error in exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, f"Validation failed: {errors}")


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error: %s", exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"An unexpected error occurred: {exc}")


@app.post("/api/v1/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(req: CreatePaymentRequest, payments: PaymentService = Depends(get_payment_service)):
    """Create a payment in `PENDING`."""

    return payments.create_payment(req)


@app.get("/api/v1/payments/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: int, payments: PaymentService = Depends(get_payment_service)):
    return payments.get_payment(payment_id)


@app.get("/api/v1/payments", response_model=list[PaymentResponse])
def list_payments(
    payment_status: PaymentStatus | None = Query(default=None, alias="status"),
    sender_id: str | None = Query(default=None, alias="senderId"),
    recipient_id: str | None = Query(default=None, alias="recipientId"),
    payments: PaymentService = Depends(get_payment_service),
):
    """List payments, optionally filtered by exactly one of status, sender or recipient."""

    filters = [value for value in (payment_status, sender_id, recipient_id) if value is not None]
    if len(filters) > 1:
        raise ValidationError([FieldError("filter", "Only one of status, senderId, recipientId may be given")])
    if payment_status is not None:
        return payments.list_payments_by_status(payment_status)
    if sender_id is not None:
        return payments.list_payments_by_sender(sender_id)
    if recipient_id is not None:
        return payments.list_payments_by_recipient(recipient_id)
    return payments.list_payments()


@app.patch("/api/v1/payments/{payment_id}/status", response_model=PaymentResponse)
def update_payment_status(
    payment_id: int,
    payment_status: PaymentStatus = Query(alias="status"),
    payments: PaymentService = Depends(get_payment_service),
):
    """Replace the status of one payment."""

    return payments.update_payment_status(payment_id, payment_status)


@app.delete("/api/v1/payments/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(payment_id: int, payments: PaymentService = Depends(get_payment_service)):
    payments.delete_payment(payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}
