"""Consistency manager: runs commands with retry, error translation and compensation.

Every command handler already executes inside one Protean unit of work, so
a handler either commits all of its writes or none of them. This module adds
what sits around that unit of work:

* a stale write (``ExpectedVersionError``, or a duplicate insert of a record
  another writer just created) re-runs the whole command, which
  re-reads and re-validates, up to ``max_transaction_attempts`` times and
  then surfaces as ``ConflictError``;
* typed domain errors pass through untouched, anything else is logged and
  re-raised as ``InternalError``;
* compensations registered by the caller (e.g. deleting an uploaded file)
  run when the command finally fails. Their own failures are only logged.
"""

from collections.abc import Callable, Iterable

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from sqlalchemy.exc import IntegrityError

from commerce.exceptions import ConflictError, ForbiddenError, InternalError, error_messages

# Errors that already carry a client-facing category
TYPED_ERRORS = (ValidationError, ObjectNotFoundError, ForbiddenError, ConflictError, InternalError)

Compensation = Callable[[], None]


def is_duplicate_write(exc) -> bool:
    """True if ``exc`` was caused by two writers inserting the same record.

    Providers may wrap the driver error, so the whole cause chain is checked.
    """
    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, IntegrityError):
            return True
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return False


class ConsistencyManager:
    def __init__(self, domain, settings, logger=None) -> None:
        self.domain = domain
        self.max_attempts = max(1, settings.max_transaction_attempts)
        self.logger = logger or structlog.get_logger(__name__)

    def execute(self, command, compensations: Iterable[Compensation] = ()):
        """Process ``command`` synchronously and return the handler's result."""
        command_name = type(command).__name__
        try:
            return self._with_retries(command, command_name)
        except Exception:
            self._compensate(command_name, compensations)
            raise

    def query(self, fn: Callable, *args, **kwargs):
        """Run a read path with the same error translation as commands."""
        try:
            return fn(*args, **kwargs)
        except TYPED_ERRORS:
            raise
        except Exception as exc:
            self.logger.exception("query_failed", query=getattr(fn, "__name__", repr(fn)))
            raise InternalError({"error": ["An unexpected error occurred"]}) from exc

    def _with_retries(self, command, command_name):
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self.domain.process(command, asynchronous=False)
            except ExpectedVersionError as exc:
                stale = exc
            except Exception as exc:
                if not is_duplicate_write(exc):
                    if isinstance(exc, TYPED_ERRORS):
                        self.logger.info("command_rejected", command=command_name, error=error_messages(exc))
                        raise
                    self.logger.exception("command_failed", command=command_name)
                    raise InternalError({"error": ["An unexpected error occurred"]}) from exc
                stale = exc

            if attempt == self.max_attempts:
                self.logger.warning("command_conflict", command=command_name, attempts=attempt)
                raise ConflictError({"conflict": ["The resource was modified concurrently, please retry"]}) from stale
            self.logger.info("command_retry", command=command_name, attempt=attempt)

    def _compensate(self, command_name, compensations):
        for compensation in compensations:
            try:
                compensation()
            except Exception:
                self.logger.exception(
                    "compensation_failed",
                    command=command_name,
                    compensation=getattr(compensation, "__name__", repr(compensation)),
                )
