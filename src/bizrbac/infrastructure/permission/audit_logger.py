"""Audit logging of authorization decisions."""

import asyncio
import logging
import threading

from bizrbac.domain.entities import AuditLogEntry
from bizrbac.domain.exceptions import AuditWriteFailure

logger = logging.getLogger(__name__)


class AuditLogger:
    """Appends one immutable entry per decision.

    ``record`` is best-effort: a failed write is logged and counted in
    ``failures`` but never raised to the authorization path. Each entry is
    written in its own unit of work, so a cancelled or failed write leaves
    nothing behind.
    """

    def __init__(self, unit_of_work_factory: type, timeout: float | None = None) -> None:
        self._uow_factory = unit_of_work_factory
        self._timeout = timeout
        self._failures = 0
        self._lock = threading.Lock()

    @property
    def failures(self) -> int:
        """Number of entries that could not be persisted."""
        with self._lock:
            return self._failures

    async def append(self, entry: AuditLogEntry, timeout: float | None = None) -> None:
        """Persist entry or raise AuditWriteFailure."""
        deadline = timeout if timeout is not None else self._timeout
        try:
            async with asyncio.timeout(deadline):
                async with self._uow_factory() as uow:
                    await uow.audit_logs.append(entry)
        except TimeoutError as e:
            raise AuditWriteFailure(f"Audit write timed out after {deadline}s") from e
        except Exception as e:
            raise AuditWriteFailure(str(e) or type(e).__name__) from e

    async def record(self, entry: AuditLogEntry, timeout: float | None = None) -> bool:
        """Persist entry; on failure log and count it. Returns True when written."""
        try:
            await self.append(entry, timeout)
        except AuditWriteFailure:
            with self._lock:
                self._failures += 1
            logger.exception(
                "Failed to log permission access: user=%s permission=%s result=%s",
                entry.user_id,
                entry.permission,
                entry.result,
            )
            return False
        return True
