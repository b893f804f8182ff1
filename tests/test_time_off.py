"""
Tests for the time-off store.
"""
import pytest

from reservations.core.exceptions import ForbiddenError, InvalidTimeOff, TimeOffNotFound
from reservations.models.time_off import TimeOffCreate
from reservations.services.time_off import (
    add_time_off,
    delete_time_off,
    find_time_off_in_range,
    list_time_off,
)

from conftest import MONDAY, at


def test_add_and_list(session, business, owner):
    add_time_off(session, business.id, owner.id, TimeOffCreate(start_time=at(MONDAY, 14), end_time=at(MONDAY, 16), reason="Dentist"))
    add_time_off(session, business.id, owner.id, TimeOffCreate(start_time=at(MONDAY, 9), end_time=at(MONDAY, 10)))

    rows = list_time_off(session, business.id)

    assert [(r.start_time, r.reason) for r in rows] == [
        (at(MONDAY, 9), "Time off"),
        (at(MONDAY, 14), "Dentist"),
    ]


@pytest.mark.parametrize("end_hour", [14, 13])
def test_end_must_follow_start(session, business, owner, end_hour):
    with pytest.raises(InvalidTimeOff):
        add_time_off(session, business.id, owner.id, TimeOffCreate(start_time=at(MONDAY, 14), end_time=at(MONDAY, end_hour)))


def test_only_owner_adds(session, business, customer):
    with pytest.raises(ForbiddenError):
        add_time_off(session, business.id, customer.id, TimeOffCreate(start_time=at(MONDAY, 14), end_time=at(MONDAY, 16)))


def test_delete(session, business, owner, customer):
    row = add_time_off(session, business.id, owner.id, TimeOffCreate(start_time=at(MONDAY, 14), end_time=at(MONDAY, 16)))

    with pytest.raises(ForbiddenError):
        delete_time_off(session, row.id, customer.id)

    delete_time_off(session, row.id, owner.id)
    assert list_time_off(session, business.id) == []

    with pytest.raises(TimeOffNotFound):
        delete_time_off(session, row.id, owner.id)


def test_range_query_is_strict(session, business, owner):
    add_time_off(session, business.id, owner.id, TimeOffCreate(start_time=at(MONDAY, 14), end_time=at(MONDAY, 16)))

    assert find_time_off_in_range(session, business.id, at(MONDAY, 13), at(MONDAY, 14)) == []
    assert find_time_off_in_range(session, business.id, at(MONDAY, 16), at(MONDAY, 17)) == []
    assert len(find_time_off_in_range(session, business.id, at(MONDAY, 15, 59), at(MONDAY, 17))) == 1
