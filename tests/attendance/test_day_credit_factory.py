from datetime import date, time

from lgu_hris.attendance.factory import DayCreditStrategyFactory
from lgu_hris.attendance.model import DayPunches
from lgu_hris.attendance.strategies.approved_record_strategy import ApprovedRecordStrategy
from lgu_hris.attendance.strategies.base import DayContext
from lgu_hris.attendance.strategies.rest_day_strategy import RestDayStrategy
from lgu_hris.attendance.strategies.time_based_strategy import TimeBasedStrategy
from lgu_hris.attendance.windows import time_based_credit


def _ctx(**kwargs) -> DayContext:
    base = dict(day=date(2025, 3, 3), time_credit=0.0, has_approved_record=False, is_weekend=False, holiday=None)
    base.update(kwargs)
    return DayContext(**base)


def test_factory_returns_approved_record_first():
    f = DayCreditStrategyFactory()
    ctx = _ctx(has_approved_record=True, is_weekend=True)
    strategy = f.for_day(ctx)
    assert isinstance(strategy, ApprovedRecordStrategy)
    assert strategy.credit(ctx) == 1.0


def test_factory_returns_rest_day_for_idle_weekend_or_holiday():
    f = DayCreditStrategyFactory()
    assert isinstance(f.for_day(_ctx(is_weekend=True)), RestDayStrategy)
    assert isinstance(f.for_day(_ctx(holiday="Independence Day")), RestDayStrategy)
    assert f.for_day(_ctx(holiday="Independence Day")).credit(_ctx()) == 0.0


def test_factory_uses_logs_otherwise():
    f = DayCreditStrategyFactory()
    worked_weekend = _ctx(is_weekend=True, time_credit=0.5)
    assert isinstance(f.for_day(worked_weekend), TimeBasedStrategy)
    assert f.for_day(worked_weekend).credit(worked_weekend) == 0.5
    assert isinstance(f.for_day(_ctx()), TimeBasedStrategy)


def test_punch_patterns():
    t = time(8, 0)
    assert time_based_credit(DayPunches(t, t, t, t)) == 1.0
    assert time_based_credit(DayPunches(t, None, None, t)) == 1.0
    assert time_based_credit(DayPunches(t, t, None, None)) == 0.5
    assert time_based_credit(DayPunches(None, None, t, t)) == 0.5
    assert time_based_credit(DayPunches(t, None, None, None)) == 0.0
    assert time_based_credit(DayPunches(None, t, t, None)) == 0.0
