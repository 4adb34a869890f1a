"""
Logging and tracing for the OSS MCP server.

Logs are structlog events written to stderr, since stdout is the JSON-RPC
channel under the stdio transport. Tracing is opt-in: it starts only when
OTEL_EXPORTER_OTLP_ENDPOINT is set and the ``otel`` extra is installed.

Environment Variables:
- OTEL_EXPORTER_OTLP_ENDPOINT: OTLP/HTTP collector base URL
- OTEL_SDK_DISABLED: 'true' turns tracing off even with an endpoint
"""
from __future__ import annotations

import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any

import structlog

_tracer: Any | None = None
_started_at: float = perf_counter()

# Parameter names whose values never reach the logs
_REDACT = ("password", "access_key", "secret", "token", "credential", "auth")
_MAX_VALUE_LENGTH = 100
_MAX_LIST_ITEMS = 10


def get_uptime_seconds() -> float:
    return perf_counter() - _started_at


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Route structlog (and stdlib logging from boto3, urllib3) to stderr.

    Args:
        level: DEBUG, INFO, WARNING or ERROR
        json_format: one JSON object per line instead of console key=value output
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    renderer = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)
    # botocore logs every request at INFO
    logging.getLogger("botocore").setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str = "oss-mcp") -> structlog.BoundLogger:
    return structlog.get_logger(name)


def init_tracing(service_name: str = "oss-mcp-server", service_version: str = "1.0.0") -> Any | None:
    """Start an OTLP/HTTP span exporter and return the tracer, or None when off."""
    global _tracer

    if os.getenv("OTEL_SDK_DISABLED", "false").lower() == "true":
        get_logger().info("Tracing disabled via OTEL_SDK_DISABLED")
        return None

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        get_logger().debug("No OTLP endpoint configured, tracing off")
        return None

    try:
        from opentelemetry import trace
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
    except ImportError:
        get_logger().warning(
            "OTLP endpoint set but OpenTelemetry is not installed",
            hint="pip install 'oss-mcp-server[otel]'"
        )
        return None

    provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: service_name, SERVICE_VERSION: service_version})
    )
    exporter = OTLPSpanExporter(endpoint=f"{endpoint.rstrip('/')}/v1/traces")
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(service_name)

    get_logger().info("Tracing enabled", service=service_name, endpoint=endpoint)
    return _tracer


def get_tracer() -> Any | None:
    return _tracer


@dataclass
class ToolExecutionContext:
    """One tool invocation: its timing, optional span and a result summary.

    Handlers set ``summary`` to a small dict (counts, keys) that is logged
    with the completion event.
    """

    tool_name: str
    domain: str
    params: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=perf_counter)
    span: Any | None = None
    summary: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        self.log = get_logger(f"oss-mcp.{self.domain}").bind(tool=self.tool_name)

    @property
    def duration_ms(self) -> float:
        return round((perf_counter() - self.started) * 1000, 2)

    def started_event(self) -> None:
        self.log.info("Tool call started", params=_sanitize_params(self.params))

    def finished_event(self) -> None:
        self.log.info("Tool call finished", duration_ms=self.duration_ms, **(self.summary or {}))

    def failed_event(self, error: Exception) -> None:
        self.log.error(
            "Tool call failed",
            duration_ms=self.duration_ms,
            error_type=type(error).__name__,
            error=str(error),
        )


def _set_span_status(span: Any, error: Exception | None = None) -> None:
    from opentelemetry.trace import Status, StatusCode

    if error is None:
        span.set_status(Status(StatusCode.OK))
    else:
        span.record_exception(error)
        span.set_status(Status(StatusCode.ERROR, str(error)))


@asynccontextmanager
async def observe_tool(
    tool_name: str,
    domain: str,
    params: dict[str, Any] | None = None
) -> AsyncGenerator[ToolExecutionContext, None]:
    """Log (and trace, when enabled) a tool call around the wrapped block.

    Exceptions are logged and re-raised; turning them into tool responses is
    the caller's job.

    Example:
        async with observe_tool("list_oss_files", "storage", params) as ctx:
            files = await asyncio.to_thread(list_store_files, ...)
            ctx.summary = {"count": len(files)}
    """
    ctx = ToolExecutionContext(tool_name=tool_name, domain=domain, params=params or {})

    tracer = get_tracer()
    if tracer:
        ctx.span = tracer.start_span(
            tool_name,
            attributes={"tool.name": tool_name, "tool.domain": domain},
        )

    ctx.started_event()
    try:
        yield ctx
    except Exception as e:
        ctx.failed_event(e)
        if ctx.span:
            _set_span_status(ctx.span, e)
        raise
    else:
        ctx.finished_event()
        if ctx.span:
            _set_span_status(ctx.span)
    finally:
        if ctx.span:
            ctx.span.end()


def _sanitize_params(params: dict[str, Any]) -> dict[str, Any]:
    """Mask credentials and shorten long values before logging."""
    sanitized: dict[str, Any] = {}
    for key, value in params.items():
        if any(marker in key.lower() for marker in _REDACT):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, str) and len(value) > _MAX_VALUE_LENGTH:
            sanitized[key] = f"{value[:_MAX_VALUE_LENGTH]}..."
        elif isinstance(value, list) and len(value) > _MAX_LIST_ITEMS:
            sanitized[key] = f"[{len(value)} items]"
        else:
            sanitized[key] = value
    return sanitized


async def check_observability_health() -> dict[str, Any]:
    return {
        "logging": "structlog",
        "tracing": "otlp" if _tracer else "disabled",
        "uptime_seconds": round(get_uptime_seconds(), 2),
    }


def init_observability(
    service_name: str = "oss-mcp-server",
    service_version: str = "1.0.0",
    log_level: str = "INFO",
    json_logs: bool = False
) -> None:
    """Configure logging, then tracing."""
    configure_logging(level=log_level, json_format=json_logs)
    init_tracing(service_name=service_name, service_version=service_version)

    get_logger().info(
        "Observability initialized",
        service=service_name,
        version=service_version,
        log_level=log_level,
    )
