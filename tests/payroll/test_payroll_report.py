from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd
import pytest

from lgu_hris.common.export import rows_to_csv, rows_to_xlsx
from lgu_hris.core.enums import ComputePeriod
from lgu_hris.payroll.calculator.standard_calculator import StandardPayrollCalculator
from lgu_hris.payroll.service import PAYROLL_FIELDS, PayrollReportService


def test_daily_rate_from_monthly_salary_or_daily_wage():
    calc = StandardPayrollCalculator()
    assert calc.daily_rate(monthly_rate=22000) == 1000.0
    assert calc.daily_rate(monthly_rate=22000, daily_wage=610.5) == 610.5
    assert calc.daily_rate(monthly_rate=0) == 0.0


def test_gross_pay_deducts_lates():
    line = StandardPayrollCalculator().gross_pay(days=10, lates=240, daily_rate=1000)
    assert line.gross_pay == 9500.0
    assert line.lates_deduction == 500.0


def test_gross_pay_never_negative():
    line = StandardPayrollCalculator().gross_pay(days=0, lates=60, daily_rate=800)
    assert line.gross_pay == 0.0
    assert line.lates_deduction == 100.0


@dataclass
class FakeComputedRepo:
    rows: list[dict] = field(default_factory=list)
    queries: list[dict] = field(default_factory=list)

    def list_for_period(self, **query):
        self.queries.append(query)
        return self.rows


def _repo() -> FakeComputedRepo:
    return FakeComputedRepo(
        rows=[
            {
                "emp_objid": "E1",
                "idno": "2021-001",
                "surname": "SANTOS",
                "firstname": "ANA",
                "middlename": None,
                "extension": None,
                "position_title": "Administrative Aide",
                "total_days": 11,
                "total_lates": 48,
                "total_netdays": 10.9,
                "monthly_rate": 22000,
                "daily_wage": None,
                "computestatus": "Approved",
            },
            {
                "emp_objid": "E2",
                "idno": None,
                "surname": "REYES",
                "firstname": "BEN",
                "total_days": 10,
                "total_lates": 0,
                "total_netdays": 10,
                "monthly_rate": None,
                "daily_wage": 500,
                "computestatus": "For Approval",
            },
        ]
    )


def test_build_payroll_report_rows_and_summary():
    repo = _repo()
    report = PayrollReportService(repo).build_payroll_report(month=3, year=2025, period=ComputePeriod.FIRST)

    assert repo.queries == [{"computed_month": "March", "computed_year": 2025, "period": "1st Half"}]

    ana, ben = report.rows
    assert ana["full_name"] == "Santos, Ana"
    assert ana["daily_rate"] == 1000.0
    assert ana["lates_deduction"] == 100.0
    assert ana["gross_pay"] == 10900.0
    assert ben["position_title"] == "-"
    assert ben["idno"] == ""
    assert ben["gross_pay"] == 5000.0

    assert report.summary == {
        "month": "March",
        "year": 2025,
        "period": "1st Half",
        "employees": 2,
        "total_gross_pay": 15900.0,
        "total_lates_deduction": 100.0,
    }


def test_payroll_exports():
    report = PayrollReportService(_repo()).build_payroll_report(month=3, year=2025, period=ComputePeriod.FULL)

    csv_bytes = rows_to_csv(report.rows, PAYROLL_FIELDS)
    assert csv_bytes.startswith(b"\xef\xbb\xbf")
    header = csv_bytes.decode("utf-8-sig").splitlines()[0]
    assert header.split(",") == PAYROLL_FIELDS

    frame = pd.read_excel(rows_to_xlsx(report.rows, PAYROLL_FIELDS, sheet_name="Payroll"), sheet_name="Payroll")
    assert list(frame.columns) == PAYROLL_FIELDS
    assert frame["gross_pay"].tolist() == pytest.approx([10900.0, 5000.0])


def test_empty_period():
    report = PayrollReportService(FakeComputedRepo()).build_payroll_report(
        month=1, year=2025, period=ComputePeriod.SECOND
    )
    assert report.rows == []
    assert report.summary["employees"] == 0
    assert rows_to_csv([], PAYROLL_FIELDS).decode("utf-8-sig").strip() == ",".join(PAYROLL_FIELDS)
