"""Structured JSON logging with request context fields.

Every record carries the service name, the request's trace id and route, and
the id of the payment being worked on (empty outside a request).
"""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from paysvc.common.config import settings


trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")
route_ctx: ContextVar[str] = ContextVar("route", default="")
payment_id_ctx: ContextVar[str] = ContextVar("payment_id", default="")

CONTEXT_FIELDS = {
    "trace_id": trace_id_ctx,
    "route": route_ctx,
    "payment_id": payment_id_ctx,
}


def bind_payment_id(payment_id: int | None) -> None:
    """Tag the rest of the current request's log lines with `payment_id`."""

    payment_id_ctx.set("" if payment_id is None else str(payment_id))


class ContextFilter(logging.Filter):
    """Inject service name and request context into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = settings.service_name
        for name, var in CONTEXT_FIELDS.items():
            setattr(record, name, var.get())
        return True


def configure_logging() -> None:
    """Send JSON lines to stdout from the root logger."""

    handler = logging.StreamHandler(sys.stdout)
    context_filter = ContextFilter()
    handler.addFilter(context_filter)
    fields = " ".join(f"%({name})s" for name in CONTEXT_FIELDS)
    handler.setFormatter(JsonFormatter(f"%(asctime)s %(levelname)s %(service_name)s {fields} %(message)s"))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)
    root.addFilter(context_filter)


logger = logging.getLogger("paysvc")
