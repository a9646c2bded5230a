"""Spreadsheet downloads for report rows."""

from __future__ import annotations

import csv
import io
from typing import Iterable, Sequence

import pandas as pd

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def rows_to_csv(rows: Iterable[dict], fieldnames: Sequence[str]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    # BOM so Excel opens the file as UTF-8.
    return out.getvalue().encode("utf-8-sig")


def rows_to_xlsx(rows: Iterable[dict], fieldnames: Sequence[str], *, sheet_name: str = "Report") -> io.BytesIO:
    df = pd.DataFrame(list(rows), columns=list(fieldnames))
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name[:31])
    output.seek(0)
    return output
