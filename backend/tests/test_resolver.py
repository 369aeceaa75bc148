"""
Tests for the availability resolver.
"""

import logging
from datetime import date

import pytest
import pytz

from barbershop.services.availability.config import time_str_to_minutes
from barbershop.services.availability.resolver import (
    REASON_CLOSED,
    REASON_DAY_OFF,
    REASON_INACTIVE,
    resolve_working_intervals,
    weekday_number,
)
from barbershop.services.availability.rules import (
    BarberSchedule,
    BusinessHours,
    DayOverride,
    Shift,
    select_override,
)

TZ = pytz.timezone("Europe/Madrid")
MONDAY = date(2024, 11, 25)
SUNDAY = date(2024, 11, 24)


def shift(start, end):
    return Shift(time_str_to_minutes(start), time_str_to_minutes(end))


def hours(day):
    return [str(s) for s in day.intervals]


BUSINESS = BusinessHours(primary=shift("09:00", "19:00"))


class TestWeekdayNumber:

    def test_sunday_is_zero(self):
        assert weekday_number(SUNDAY, TZ) == 0

    def test_monday_and_saturday(self):
        assert weekday_number(MONDAY, TZ) == 1
        assert weekday_number(date(2024, 11, 30), TZ) == 6

    @pytest.mark.parametrize("tz_name", ["Pacific/Kiritimati", "Pacific/Pago_Pago", "UTC"])
    def test_weekday_does_not_depend_on_timezone(self, tz_name):
        assert weekday_number(MONDAY, pytz.timezone(tz_name)) == 1


class TestResolveWorkingIntervals:

    def test_business_defaults(self):
        day = resolve_working_intervals(BarberSchedule(barber_id=1), BUSINESS, [], MONDAY, TZ)

        assert not day.is_closed
        assert hours(day) == ["09:00-19:00"]

    def test_inactive_barber_is_closed(self):
        schedule = BarberSchedule(barber_id=1, is_active=False)
        day = resolve_working_intervals(schedule, BUSINESS, [], MONDAY, TZ)

        assert day.is_closed
        assert day.reason == REASON_INACTIVE
        assert day.intervals == ()

    def test_day_off(self):
        day = resolve_working_intervals(BarberSchedule(barber_id=1), BUSINESS, [], SUNDAY, TZ)

        assert day.is_closed
        assert day.reason == REASON_DAY_OFF

    def test_day_off_wins_over_override_hours(self):
        override = DayOverride(date=SUNDAY, barber_id=1, start=600, end=720)
        day = resolve_working_intervals(
            BarberSchedule(barber_id=1), BUSINESS, [override], SUNDAY, TZ
        )

        assert day.is_closed

    def test_barber_hours_replace_business_hours(self):
        schedule = BarberSchedule(barber_id=1, primary=shift("10:00", "14:00"))
        day = resolve_working_intervals(schedule, BUSINESS, [], MONDAY, TZ)

        assert hours(day) == ["10:00-14:00"]

    def test_barber_split_shift(self):
        schedule = BarberSchedule(
            barber_id=1,
            primary=shift("10:00", "14:00"),
            secondary=shift("15:00", "20:00"),
        )
        day = resolve_working_intervals(schedule, BUSINESS, [], MONDAY, TZ)

        assert hours(day) == ["10:00-14:00", "15:00-20:00"]
        assert day.is_split

    def test_business_second_shift_used_when_barber_has_none(self):
        business = BusinessHours(primary=shift("09:00", "13:00"), secondary=shift("16:00", "20:00"))
        day = resolve_working_intervals(BarberSchedule(barber_id=1), business, [], MONDAY, TZ)

        assert hours(day) == ["09:00-13:00", "16:00-20:00"]

    def test_shop_closure(self):
        override = DayOverride(date=MONDAY, barber_id=None, is_closed=True)
        day = resolve_working_intervals(
            BarberSchedule(barber_id=1), BUSINESS, [override], MONDAY, TZ
        )

        assert day.is_closed
        assert day.reason == REASON_CLOSED

    def test_barber_closure_beats_shop_hours(self):
        overrides = [
            DayOverride(date=MONDAY, barber_id=None, start=600, end=720),
            DayOverride(date=MONDAY, barber_id=1, is_closed=True),
        ]
        day = resolve_working_intervals(BarberSchedule(barber_id=1), BUSINESS, overrides, MONDAY, TZ)

        assert day.is_closed

    def test_barber_hours_beat_shop_closure(self):
        overrides = [
            DayOverride(date=MONDAY, barber_id=None, is_closed=True),
            DayOverride(date=MONDAY, barber_id=1, start=600, end=720),
        ]
        day = resolve_working_intervals(BarberSchedule(barber_id=1), BUSINESS, overrides, MONDAY, TZ)

        assert hours(day) == ["10:00-12:00"]

    def test_override_for_other_barber_is_ignored(self):
        override = DayOverride(date=MONDAY, barber_id=2, is_closed=True)
        day = resolve_working_intervals(
            BarberSchedule(barber_id=1), BUSINESS, [override], MONDAY, TZ
        )

        assert hours(day) == ["09:00-19:00"]

    def test_override_hours_keep_second_shift(self):
        schedule = BarberSchedule(
            barber_id=1,
            primary=shift("10:00", "14:00"),
            secondary=shift("16:00", "20:00"),
        )
        override = DayOverride(date=MONDAY, barber_id=None, start=time_str_to_minutes("11:00"),
                               end=time_str_to_minutes("13:00"))
        day = resolve_working_intervals(schedule, BUSINESS, [override], MONDAY, TZ)

        assert hours(day) == ["11:00-13:00", "16:00-20:00"]

    def test_partial_override_replaces_only_given_bound(self):
        override = DayOverride(date=MONDAY, barber_id=1, end=time_str_to_minutes("15:00"))
        day = resolve_working_intervals(
            BarberSchedule(barber_id=1), BUSINESS, [override], MONDAY, TZ
        )

        assert hours(day) == ["09:00-15:00"]

    def test_override_reaching_second_shift_drops_it(self, caplog):
        schedule = BarberSchedule(
            barber_id=1,
            primary=shift("10:00", "14:00"),
            secondary=shift("16:00", "20:00"),
        )
        override = DayOverride(date=MONDAY, barber_id=1, end=time_str_to_minutes("17:00"))

        with caplog.at_level(logging.WARNING):
            day = resolve_working_intervals(schedule, BUSINESS, [override], MONDAY, TZ)

        assert hours(day) == ["10:00-17:00"]
        assert "Dropping second shift" in caplog.text

    def test_second_shift_must_start_after_first_end(self, caplog):
        schedule = BarberSchedule(
            barber_id=1,
            primary=shift("10:00", "14:00"),
            secondary=shift("14:00", "18:00"),
        )

        with caplog.at_level(logging.WARNING):
            day = resolve_working_intervals(schedule, BUSINESS, [], MONDAY, TZ)

        assert hours(day) == ["10:00-14:00"]
        assert "Dropping second shift" in caplog.text

    def test_malformed_primary_is_skipped(self, caplog):
        schedule = BarberSchedule(
            barber_id=1,
            primary=shift("14:00", "10:00"),
            secondary=shift("16:00", "20:00"),
        )

        with caplog.at_level(logging.WARNING):
            day = resolve_working_intervals(schedule, BUSINESS, [], MONDAY, TZ)

        assert hours(day) == ["16:00-20:00"]
        assert not day.is_closed
        assert "malformed primary shift" in caplog.text

    def test_malformed_override_leaves_no_intervals(self, caplog):
        override = DayOverride(date=MONDAY, barber_id=1, start=time_str_to_minutes("20:00"))

        with caplog.at_level(logging.WARNING):
            day = resolve_working_intervals(
                BarberSchedule(barber_id=1), BUSINESS, [override], MONDAY, TZ
            )

        assert day.intervals == ()
        assert not day.is_closed


class TestSelectOverride:

    def test_precedence(self):
        shop_hours = DayOverride(date=MONDAY, start=600, end=700)
        shop_closed = DayOverride(date=MONDAY, is_closed=True)
        own_hours = DayOverride(date=MONDAY, barber_id=1, start=600, end=700)
        own_closed = DayOverride(date=MONDAY, barber_id=1, is_closed=True)

        everything = [shop_hours, shop_closed, own_hours, own_closed]
        assert select_override(everything, 1, MONDAY) is own_closed
        assert select_override([shop_hours, shop_closed, own_hours], 1, MONDAY) is own_hours
        assert select_override([shop_hours, shop_closed], 1, MONDAY) is shop_closed
        assert select_override([shop_hours], 1, MONDAY) is shop_hours

    def test_other_dates_are_ignored(self):
        other_day = DayOverride(date=SUNDAY, barber_id=1, is_closed=True)
        assert select_override([other_day], 1, MONDAY) is None
