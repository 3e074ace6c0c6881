"""Unit tests for AuditLogger."""

import asyncio
import logging
from uuid import uuid4

import pytest

from bizrbac.domain.entities import AuditLogEntry
from bizrbac.domain.exceptions import AuditWriteFailure
from bizrbac.domain.value_objects import AuditResult
from bizrbac.infrastructure.permission import AuditLogger

from tests.conftest import MONDAY_10AM


def _entry() -> AuditLogEntry:
    return AuditLogEntry(
        id=uuid4(),
        user_id="u1",
        permission="orders:update",
        resource="orders",
        result=AuditResult.DENIED,
        reason="custom permission denied",
        created_at=MONDAY_10AM,
        tenant_id="B1",
    )


@pytest.mark.asyncio
async def test_record_appends(uow_factory, fake_uow) -> None:
    audit = AuditLogger(uow_factory)
    assert await audit.record(_entry())
    assert len(fake_uow.audit_logs.entries) == 1
    assert audit.failures == 0


@pytest.mark.asyncio
async def test_append_raises_audit_write_failure(uow_factory, fake_uow) -> None:
    fake_uow.audit_logs.fail = True
    with pytest.raises(AuditWriteFailure, match="audit storage unavailable"):
        await AuditLogger(uow_factory).append(_entry())


@pytest.mark.asyncio
async def test_record_swallows_and_counts_failures(uow_factory, fake_uow, caplog) -> None:
    fake_uow.audit_logs.fail = True
    audit = AuditLogger(uow_factory)
    with caplog.at_level(logging.ERROR):
        assert not await audit.record(_entry())
        assert not await audit.record(_entry())
    assert audit.failures == 2
    assert "user=u1 permission=orders:update result=DENIED" in caplog.text


@pytest.mark.asyncio
async def test_slow_write_times_out(uow_factory, fake_uow, monkeypatch) -> None:
    async def slow_append(entry):
        await asyncio.sleep(1)

    monkeypatch.setattr(fake_uow.audit_logs, "append", slow_append)
    audit = AuditLogger(uow_factory, timeout=0.05)
    assert not await audit.record(_entry())
    assert audit.failures == 1
