"""Unique-Constraint Writes — lost insert races become 409s or duplicate outcomes.

Invariants:
    - write_unique raises ConflictError and leaves the session usable
    - try_unique_write reports False instead of raising
    - An IntegrityError escaping a managed session surfaces as ConflictError
"""

from datetime import date, time, timedelta

import pytest
from sqlalchemy import func, select

from urbanestate.core.errors import ConflictError, ErrorContext
from urbanestate.infrastructure.database import (
    DatabaseSessionManager, try_unique_write, write_unique,
)
from urbanestate.models.availability_slot import AvailabilitySlot


def _clone(slot: AvailabilitySlot) -> AvailabilitySlot:
    return AvailabilitySlot(
        property_id=slot.property_id, slot_date=slot.slot_date,
        start_time=slot.start_time, end_time=time(11, 0),
        capacity=1, is_available=True,
    )


async def _slot_count(session, property_id) -> int:
    return await session.scalar(
        select(func.count()).select_from(AvailabilitySlot)
        .where(AvailabilitySlot.property_id == property_id),
    )


async def test_write_unique_raises_conflict(test_session_factory, open_slot):
    async with test_session_factory() as session:
        session.add(_clone(open_slot))
        with pytest.raises(ConflictError) as exc:
            await write_unique(
                session, "A slot already exists for this date and time",
                context=ErrorContext(entity_id=str(open_slot.id)),
            )
        assert exc.value.http_status == 409
        assert exc.value.message == "A slot already exists for this date and time"
        assert await _slot_count(session, open_slot.property_id) == 1


async def test_write_unique_flush_only_keeps_transaction_open(
    test_session_factory, open_slot,
):
    async with test_session_factory() as session:
        session.add(AvailabilitySlot(
            property_id=open_slot.property_id,
            slot_date=open_slot.slot_date + timedelta(days=1),
            start_time=time(9, 0), end_time=time(9, 30),
            capacity=1, is_available=True,
        ))
        await write_unique(session, "conflict", flush_only=True)
        assert session.in_transaction()
        await session.rollback()
        assert await _slot_count(session, open_slot.property_id) == 1


async def test_try_unique_write_reports_lost_race(test_session_factory, open_slot):
    async with test_session_factory() as session:
        session.add(_clone(open_slot))
        assert await try_unique_write(session) is False

        session.add(AvailabilitySlot(
            property_id=open_slot.property_id, slot_date=date.today() + timedelta(days=3),
            start_time=time(10, 0), end_time=time(10, 30),
            capacity=1, is_available=True,
        ))
        assert await try_unique_write(session) is True
        assert await _slot_count(session, open_slot.property_id) == 2


async def test_managed_session_maps_integrity_error_to_conflict(
    test_engine, test_session_factory, open_slot,
):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory

    with pytest.raises(ConflictError):
        async with manager.session() as session:
            session.add(_clone(open_slot))
            await session.commit()


def test_sqlite_engine_skips_server_pool_options():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:", pool_size=5)
    assert manager.engine.dialect.name == "sqlite"
