"""Recompute employees.pds_progress.

Run after bulk imports or schema changes:

    python scripts/recalculate_pds_progress.py            # every employee
    python scripts/recalculate_pds_progress.py --objid X  # one employee
"""

from __future__ import annotations

import argparse

from lgu_hris.main import container_from_settings, load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Recalculate PDS progress")
    parser.add_argument("--objid", help="only this employee objid")
    args = parser.parse_args()

    container = container_from_settings(load_settings())
    results = container.pds_service.recalculate_all(args.objid)

    complete = sum(1 for p in results.values() if p >= 100)
    print(f"OK: {len(results)} employee(s) updated, {complete} complete")


if __name__ == "__main__":
    main()
