"""Pull punches from every enabled terminal into CHECKINOUT.

Meant for a scheduled task, e.g. every 30 minutes:

    python scripts/sync_machines.py --start 2025-03-01 --end 2025-03-31
"""

from __future__ import annotations

import argparse

from lgu_hris.common.datetime_utils import parse_iso_date
from lgu_hris.main import container_from_settings, load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Sync biometric terminals")
    parser.add_argument("--start", type=parse_iso_date, help="first day (YYYY-MM-DD)")
    parser.add_argument("--end", type=parse_iso_date, help="last day (YYYY-MM-DD)")
    args = parser.parse_args()

    container = container_from_settings(load_settings())
    results = container.machine_sync_service.sync_all(args.start, args.end)

    failed = 0
    for r in results:
        if r.errors:
            failed += 1
            print(f"FAIL {r.machine_alias}: {'; '.join(r.errors)}")
        else:
            print(f"OK   {r.machine_alias}: found={r.found} saved={r.saved} duplicates={r.duplicates} skipped={r.skipped}")

    if failed:
        raise SystemExit(f"{failed} machine(s) failed")


if __name__ == "__main__":
    main()
