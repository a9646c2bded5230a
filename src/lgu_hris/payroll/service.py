from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.repository import ComputedDtrRepository
from ..attendance.service import month_name
from ..common.names import format_employee_name
from ..core.enums import ComputePeriod
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator

PAYROLL_FIELDS = [
    "idno",
    "full_name",
    "position_title",
    "total_days",
    "total_lates",
    "net_days",
    "monthly_rate",
    "daily_rate",
    "lates_deduction",
    "gross_pay",
    "computestatus",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class PayrollReportService:
    def __init__(
        self,
        computed: ComputedDtrRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._computed = computed
        self._calculator = calculator or StandardPayrollCalculator()

    def build_payroll_report(self, *, month: int, year: int, period: ComputePeriod) -> ReportData:
        query_rows = self._computed.list_for_period(
            computed_month=month_name(month), computed_year=year, period=period.value
        )

        out_rows: list[dict] = []
        total_gross = 0.0
        total_deductions = 0.0

        for r in query_rows:
            monthly_rate = float(r.get("monthly_rate") or 0)
            daily_rate = self._calculator.daily_rate(
                monthly_rate=monthly_rate, daily_wage=float(r.get("daily_wage") or 0)
            )
            days = float(r.get("total_days") or 0)
            lates = float(r.get("total_lates") or 0)
            line = self._calculator.gross_pay(days=days, lates=lates, daily_rate=daily_rate)

            out_rows.append(
                {
                    "emp_objid": r["emp_objid"],
                    "idno": r.get("idno") or "",
                    "full_name": format_employee_name(
                        r.get("surname"), r.get("firstname"), r.get("middlename"), r.get("extension")
                    ),
                    "position_title": r.get("position_title") or "-",
                    "total_days": days,
                    "total_lates": lates,
                    "net_days": float(r.get("total_netdays") or 0),
                    "monthly_rate": round(monthly_rate, 2),
                    "daily_rate": line.daily_rate,
                    "lates_deduction": line.lates_deduction,
                    "gross_pay": line.gross_pay,
                    "computestatus": r.get("computestatus") or "",
                }
            )
            total_gross += line.gross_pay
            total_deductions += line.lates_deduction

        summary = {
            "month": month_name(month),
            "year": year,
            "period": period.value,
            "employees": len(out_rows),
            "total_gross_pay": round(total_gross, 2),
            "total_lates_deduction": round(total_deductions, 2),
        }
        return ReportData(rows=out_rows, summary=summary)
