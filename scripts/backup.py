"""Backup the HR201 database.

Note: This script uses `mysqldump` when it is installed.
Without it, back up with MySQL Workbench or phpMyAdmin instead.
The DTR (SQL Server) database is backed up from SQL Server Management Studio.
"""

from __future__ import annotations

import importlib
import subprocess
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db = settings.HR201_DB_CONFIG

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"{db['database']}_{ts}.sql"

    cmd = [
        "mysqldump",
        f"-h{db['host']}",
        f"-P{db['port']}",
        f"-u{db['user']}",
        f"-p{db['password']}",
        "--single-transaction",
        "--routines",
        db["database"],
    ]

    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
        print(f"OK: Backup created: {out_file}")
    except FileNotFoundError:
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools or back up with Workbench.")
    except subprocess.CalledProcessError as e:
        out_file.unlink(missing_ok=True)
        raise SystemExit(f"mysqldump failed: {e.stderr.decode(errors='replace').strip()}")


if __name__ == "__main__":
    main()
