from __future__ import annotations

from ...core.constants import MINUTES_PER_DAY, WORKING_DAYS_PER_MONTH
from .base import PayLine, PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: pay net days at the daily rate; lates cost minutes/480 of a day."""

    def daily_rate(self, *, monthly_rate: float, daily_wage: float = 0.0) -> float:
        if daily_wage and daily_wage > 0:
            return round(float(daily_wage), 2)
        return round(float(monthly_rate or 0) / WORKING_DAYS_PER_MONTH, 2)

    def gross_pay(self, *, days: float, lates: float, daily_rate: float) -> PayLine:
        deduction_days = float(lates or 0) / MINUTES_PER_DAY
        net_days = max(0.0, float(days or 0) - deduction_days)
        return PayLine(
            daily_rate=daily_rate,
            gross_pay=round(net_days * daily_rate, 2),
            lates_deduction=round(deduction_days * daily_rate, 2),
        )
