"""
Tests for schedule settings management.
"""
from datetime import time

import pytest

from reservations.core.exceptions import ForbiddenError, InvalidSchedule
from reservations.models.schedule import DayOfWeek, ScheduleSettingsUpdate, WorkingDayUpdate
from reservations.services.schedule import get_schedule, update_schedule


def full_week(overrides=None):
    overrides = overrides or {}
    days = []
    for day in DayOfWeek:
        values = dict(day_of_week=day, start_time=time(9), end_time=time(17))
        values.update(overrides.get(day, {}))
        days.append(WorkingDayUpdate(**values))
    return days


def test_default_schedule(session, business):
    schedule = get_schedule(session, business.id)

    assert schedule.min_advance_booking_hours == 2
    assert schedule.max_advance_booking_days == 30
    assert schedule.default_slot_duration_minutes == 30
    assert schedule.auto_confirm_appointments is True
    assert [d.day_of_week for d in schedule.working_days] == list(DayOfWeek)
    assert [d.is_day_off for d in schedule.working_days] == [False] * 5 + [True] * 2
    assert all(d.start_time == time(9) and d.end_time == time(17) for d in schedule.working_days)


def test_update_replaces_every_day(session, business, owner):
    days = full_week({
        DayOfWeek.MONDAY: dict(break_start_time=time(12), break_end_time=time(13)),
        DayOfWeek.SUNDAY: dict(is_day_off=True, start_time=None, end_time=None),
    })

    schedule = update_schedule(
        session, business.id, owner.id,
        ScheduleSettingsUpdate(
            min_advance_booking_hours=None,
            max_advance_booking_days=14,
            default_slot_duration_minutes=45,
            auto_confirm_appointments=False,
            working_days=days,
        ),
    )

    assert schedule.min_advance_booking_hours is None
    assert schedule.max_advance_booking_days == 14
    assert schedule.default_slot_duration_minutes == 45
    assert schedule.auto_confirm_appointments is False
    assert len(schedule.working_days) == 7
    monday = schedule.working_days[0]
    assert (monday.break_start_time, monday.break_end_time) == (time(12), time(13))
    saturday = schedule.working_days[5]
    assert saturday.is_day_off is False
    assert schedule.working_days[6].is_day_off is True


def test_only_owner_updates(session, business, customer):
    with pytest.raises(ForbiddenError):
        update_schedule(session, business.id, customer.id, ScheduleSettingsUpdate(working_days=full_week()))


@pytest.mark.parametrize(
    "days",
    [
        pytest.param(full_week()[:6], id="missing-day"),
        pytest.param(full_week()[:6] + [WorkingDayUpdate(day_of_week=DayOfWeek.MONDAY)], id="duplicate-day"),
        pytest.param(full_week({DayOfWeek.TUESDAY: dict(start_time=time(17), end_time=time(9))}), id="close-before-open"),
        pytest.param(full_week({DayOfWeek.TUESDAY: dict(start_time=time(9), end_time=time(9))}), id="empty-day"),
        pytest.param(full_week({DayOfWeek.TUESDAY: dict(start_time=None)}), id="missing-open"),
        pytest.param(
            full_week({DayOfWeek.FRIDAY: dict(break_start_time=time(13), break_end_time=time(12))}),
            id="break-reversed",
        ),
        pytest.param(
            full_week({DayOfWeek.FRIDAY: dict(break_start_time=time(8), break_end_time=time(10))}),
            id="break-before-opening",
        ),
        pytest.param(
            full_week({DayOfWeek.FRIDAY: dict(break_start_time=time(16), break_end_time=time(18))}),
            id="break-after-closing",
        ),
        pytest.param(full_week({DayOfWeek.FRIDAY: dict(break_start_time=time(12))}), id="half-break"),
    ],
)
def test_invalid_week_is_rejected(session, business, owner, days):
    before = get_schedule(session, business.id)

    with pytest.raises(InvalidSchedule):
        update_schedule(session, business.id, owner.id, ScheduleSettingsUpdate(working_days=days))

    assert get_schedule(session, business.id) == before


def test_break_touching_opening_hours_is_valid(session, business, owner):
    days = full_week({DayOfWeek.WEDNESDAY: dict(break_start_time=time(9), break_end_time=time(17, 0))})
    # a break may start at opening and end at closing
    schedule = update_schedule(session, business.id, owner.id, ScheduleSettingsUpdate(working_days=days))
    wednesday = schedule.working_days[2]
    assert wednesday.break_start_time == time(9)


def test_day_off_needs_no_hours(session, business, owner):
    days = full_week({DayOfWeek.MONDAY: dict(is_day_off=True, start_time=None, end_time=None)})
    schedule = update_schedule(session, business.id, owner.id, ScheduleSettingsUpdate(working_days=days))
    assert schedule.working_days[0].is_day_off is True
