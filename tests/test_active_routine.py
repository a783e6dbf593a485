from datetime import date

import pytest

from liftlog.core.errors import NotFound
from liftlog.dao import WeeklyRoutineDAO
from liftlog.services.routines import get_active_routine, set_active_routine, start_weekly_session
from tests.factories import OTHER_OWNER, OWNER, build_routine


async def active_ids(db, owner_id=OWNER):
    return [r.id for r in await WeeklyRoutineDAO.active_for_owner(db, owner_id)]


@pytest.mark.asyncio
async def test_activate_when_none_is_active(db):
    first = await build_routine(db, name="A")
    await build_routine(db, name="B")

    await set_active_routine(db, OWNER, first.id)

    assert await active_ids(db) == [first.id]


@pytest.mark.asyncio
async def test_activate_replaces_the_active_one(db):
    first = await build_routine(db, name="A", is_active=True)
    second = await build_routine(db, name="B")

    routine = await set_active_routine(db, OWNER, second.id)

    assert routine.is_active is True
    assert await active_ids(db) == [second.id]
    assert first.is_active is False


@pytest.mark.asyncio
async def test_activate_repairs_several_active(db):
    a = await build_routine(db, name="A", is_active=True)
    await build_routine(db, name="B", is_active=True)
    c = await build_routine(db, name="C", is_active=True)

    await set_active_routine(db, OWNER, c.id)

    assert await active_ids(db) == [c.id]
    assert a.is_active is False


@pytest.mark.asyncio
async def test_activating_the_active_one_is_a_no_op(db):
    a = await build_routine(db, name="A", is_active=True)

    await set_active_routine(db, OWNER, a.id)

    assert await active_ids(db) == [a.id]


@pytest.mark.asyncio
async def test_other_owners_are_not_touched(db):
    mine = await build_routine(db, name="Mine")
    theirs = await build_routine(db, owner_id=OTHER_OWNER, name="Theirs", is_active=True)

    await set_active_routine(db, OWNER, mine.id)

    assert await active_ids(db, OTHER_OWNER) == [theirs.id]


@pytest.mark.asyncio
async def test_cannot_activate_someone_elses_routine(db):
    theirs = await build_routine(db, owner_id=OTHER_OWNER, name="Theirs")
    mine = await build_routine(db, name="Mine", is_active=True)

    with pytest.raises(NotFound):
        await set_active_routine(db, OWNER, theirs.id)

    assert await active_ids(db) == [mine.id]
    assert await active_ids(db, OTHER_OWNER) == []


@pytest.mark.asyncio
async def test_get_active_routine(db):
    assert await get_active_routine(db, OWNER) is None
    a = await build_routine(db, name="A", is_active=True)

    active = await get_active_routine(db, OWNER)

    assert active.id == a.id


@pytest.mark.asyncio
async def test_start_weekly_session_anchors_to_monday_and_activates(db):
    old = await build_routine(db, name="Old", is_active=True)
    new = await build_routine(db, name="New")

    routine = await start_weekly_session(db, OWNER, new.id, today=date(2026, 3, 15))

    assert routine.week_start_date == date(2026, 3, 9)
    assert await active_ids(db) == [new.id]
    assert old.is_active is False
