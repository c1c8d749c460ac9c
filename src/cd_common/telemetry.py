"""Error-reporting side channel.

Services report every failure as (operation, context, error) and drop a
breadcrumb on notable successes. The reporter is an external collaborator;
the default implementation writes to the `cd.telemetry` logger.

Reporting is fire-and-forget: `report_failure` never raises, so a broken
reporter can not replace the error the caller is about to re-raise.
"""

import logging
from typing import Any, Protocol

logger = logging.getLogger("cd.telemetry")


class ErrorReporter(Protocol):
    def capture(self, operation: str, context: dict[str, Any], error: BaseException) -> None: ...

    def breadcrumb(self, category: str, message: str, data: dict[str, Any]) -> None: ...


class LoggingErrorReporter:
    """Default reporter — structured log lines, no network I/O."""

    def capture(self, operation: str, context: dict[str, Any], error: BaseException) -> None:
        code = getattr(error, "code", None)
        logger.warning(
            "operation=%s error=%s code=%s context=%s",
            operation,
            type(error).__name__,
            code,
            context,
            exc_info=code is None,  # unexpected errors get a traceback
        )

    def breadcrumb(self, category: str, message: str, data: dict[str, Any]) -> None:
        logger.info("[%s] %s %s", category, message, data)


_reporter: ErrorReporter = LoggingErrorReporter()


def get_reporter() -> ErrorReporter:
    return _reporter


def set_reporter(reporter: ErrorReporter) -> None:
    """Swap the process-wide reporter (e.g. a vendor SDK adapter at startup)."""
    global _reporter  # noqa: PLW0603
    _reporter = reporter


def report_failure(
    reporter: ErrorReporter, operation: str, context: dict[str, Any], error: BaseException
) -> None:
    try:
        reporter.capture(operation, context, error)
    except Exception:
        logger.exception("error reporter failed while reporting %s", operation)


def leave_breadcrumb(
    reporter: ErrorReporter, category: str, message: str, data: dict[str, Any]
) -> None:
    try:
        reporter.breadcrumb(category, message, data)
    except Exception:
        logger.exception("error reporter failed while recording breadcrumb %s", category)
