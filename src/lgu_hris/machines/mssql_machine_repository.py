from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import MSSQLConnection
from ..database.mssql_base import fetchall_dict, fetchone_dict, mssql_cursor
from .model import Machine
from .repository import CheckInOutRepository, MachineRepository

_SELECT = "SELECT ID, MachineAlias, IP, Port, MachineNumber, Enabled, sn, CommPassword FROM Machines"


def _comm_password(value) -> int:
    text = str(value or "").strip()
    return int(text) if text.isdigit() else 0


def _to_machine(row: dict) -> Machine:
    return Machine(
        machine_id=int(row["ID"]),
        alias=row.get("MachineAlias") or f"Machine {row['ID']}",
        ip=row.get("IP") or "",
        port=int(row.get("Port") or 4370),
        machine_number=int(row.get("MachineNumber") or 1),
        enabled=bool(row.get("Enabled")),
        serial_number=row.get("sn"),
        comm_password=_comm_password(row.get("CommPassword")),
    )


class MSSQLMachineRepository(MachineRepository):
    def __init__(self, conn_factory: MSSQLConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Machine]:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY ID")
            return [_to_machine(r) for r in fetchall_dict(cur)]

    def list_enabled(self) -> Sequence[Machine]:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE Enabled = 1 ORDER BY ID")
            return [_to_machine(r) for r in fetchall_dict(cur)]

    def get(self, machine_id: int) -> Optional[Machine]:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE ID = ?", machine_id)
            row = fetchone_dict(cur)
            return _to_machine(row) if row else None

    def create(self, machine: Machine) -> int:
        with mssql_cursor(self._conn_factory) as (_, cur):
            # Machines.ID is not an identity column in the vendor schema.
            cur.execute("SELECT ISNULL(MAX(ID), 0) + 1 FROM Machines")
            new_id = int(cur.fetchone()[0])
            cur.execute(
                """
                INSERT INTO Machines (ID, MachineAlias, ConnectType, IP, Port, MachineNumber, Enabled, CommPassword, sn)
                VALUES (?, ?, 1, ?, ?, ?, ?, ?, ?)
                """,
                new_id, machine.alias, machine.ip, machine.port, machine.machine_number,
                1 if machine.enabled else 0, str(machine.comm_password or ""), machine.serial_number,
            )
            return new_id

    def update(self, machine: Machine) -> bool:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE Machines
                SET MachineAlias = ?, IP = ?, Port = ?, MachineNumber = ?, Enabled = ?, CommPassword = ?, sn = ?
                WHERE ID = ?
                """,
                machine.alias, machine.ip, machine.port, machine.machine_number,
                1 if machine.enabled else 0, str(machine.comm_password or ""), machine.serial_number,
                machine.machine_id,
            )
            return cur.rowcount > 0

    def delete(self, machine_id: int) -> bool:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM Machines WHERE ID = ?", machine_id)
            return cur.rowcount > 0


class MSSQLCheckInOutRepository(CheckInOutRepository):
    def __init__(self, conn_factory: MSSQLConnection):
        self._conn_factory = conn_factory

    def user_id_for_badge(self, badge_number: str) -> Optional[int]:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT TOP 1 USERID FROM USERINFO WHERE BADGENUMBER = ?", str(badge_number))
            row = cur.fetchone()
            return int(row[0]) if row else None

    def log_exists(self, *, user_id: int, check_time: datetime) -> bool:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT TOP 1 1 FROM CHECKINOUT WHERE USERID = ? AND CHECKTIME = ?", user_id, check_time)
            return cur.fetchone() is not None

    def insert_log(self, *, user_id, check_time, check_type, verify_code, sensor_id, work_code, serial_number) -> None:
        with mssql_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO CHECKINOUT (USERID, CHECKTIME, CHECKTYPE, VERIFYCODE, SENSORID, WORKCODE, SN)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                user_id, check_time, check_type, verify_code, sensor_id, work_code, serial_number,
            )
