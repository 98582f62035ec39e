"""Structured logging configuration using structlog.

JSON output in production, colored console output elsewhere. Every event
carries the service name, version and environment. User decision text and
credentials never reach the log stream: the redaction processor replaces
them with their length.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "choosewise"

# Event keys whose values are user content or secrets
REDACTED_KEYS = frozenset({
    "prompt",
    "system_prompt",
    "systemPrompt",
    "api_key",
    "authorization",
    "x-api-key",
    "x-goog-api-key",
})


def make_app_context(version: str, environment: str) -> Processor:
    """Processor stamping service, version and environment on every event."""

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("app", SERVICE_NAME)
        event_dict.setdefault("version", version)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_app_context


def redact_sensitive(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Replace prompt text and credentials with a length marker."""
    for key in REDACTED_KEYS.intersection(event_dict):
        value = event_dict[key]
        if value is None:
            continue
        event_dict[key] = f"<redacted len={len(str(value))}>"
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    version: str = "unknown",
) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Environment name; "production" switches to JSON lines
        version: Service version stamped on every event
    """
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)
    is_production = environment.lower() == "production"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        make_app_context(version, environment),
        redact_sensitive,
    ]

    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # uvicorn and fastapi log through stdlib
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )
    handler.setLevel(log_level_int)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)

    # httpx logs every request URL at INFO
    for noisy in ("httpx", "httpcore", "asyncio", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        renderer="json" if is_production else "console",
    )
