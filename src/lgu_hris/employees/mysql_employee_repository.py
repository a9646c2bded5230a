from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PdsSnapshot
from .repository import EmployeeRepository

# lookup name -> (table, columns, order by)
LOOKUPS = {
    "blood-types": ("blood_types", "id, blood_type", "blood_type"),
    "civil-statuses": ("civilstatus", "id, civil_status", "civil_status"),
    "appointmenttypes": ("appointmenttypes", "id, appointmentname", "appointmentname"),
    "employeestatustypes": ("employeestatustypes", "*", "id"),
    "eligibility-types": ("eligibilitytypes", "id, careertypes", "careertypes"),
}

# snapshot attribute -> table (all keyed by emp_objid)
PDS_LIST_SECTIONS = {
    "children": "employee_childrens",
    "education": "employee_education",
    "eligibility": "employee_eligibility",
    "work_experience": "employee_workexperience",
    "voluntary_work": "employee_voluntary",
    "trainings": "employee_training",
    "hobbies": "employee_other_info_hobies",
    "recognitions": "employee_other_info_recognition",
    "memberships": "employee_other_info_membership",
    "references": "employee_references",
}

_DETAIL_SELECT = """
    SELECT
        e.objid, e.idno, e.dtruserid, e.dtrbadgenumber,
        e.surname, e.firstname, e.middlename, e.extension,
        e.birthdate, e.birthplace, e.gender, e.civil_status,
        e.height, e.weight, e.blood_type,
        e.gsis, e.pagibig, e.philhealth, e.sss, e.tin, e.agency_no,
        e.citizenship, e.telephone, e.mobile, e.email,
        e.pdscompleprogress, e.empstatus,
        COALESCE(e.cancreatetravel, 0) AS cancreatetravel,
        em.photo_path,
        COALESCE(dept_cur.departmentshortname, dept_emp.departmentshortname) AS department_name,
        cur.position AS position_title,
        cur.appointmentstatus AS appointment_status,
        atp.appointmentname AS appointment_name
    FROM employees e
    LEFT JOIN employees_media em ON e.objid = em.emp_objid
    LEFT JOIN department dept_emp ON dept_emp.deptid = e.deptid
    LEFT JOIN employee_designation cur ON cur.emp_objid = e.objid AND cur.ispresent = 1
    LEFT JOIN department dept_cur ON dept_cur.deptid = cur.assigneddept
    LEFT JOIN appointmenttypes atp ON cur.appointmentstatus = atp.id
"""


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_with_details(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_DETAIL_SELECT + " ORDER BY e.surname, e.firstname")
            return fetchall(cur)

    def search(self, term: str, *, limit: int) -> Sequence[dict]:
        like = f"%{term}%"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT objid, idno, dtruserid, dtrbadgenumber, surname, firstname, middlename, extension,
                       birthdate, gender, civil_status, mobile, email
                FROM employees
                WHERE surname LIKE %s OR firstname LIKE %s OR middlename LIKE %s
                   OR dtrbadgenumber LIKE %s OR idno LIKE %s OR dtruserid LIKE %s
                   OR mobile LIKE %s OR email LIKE %s
                ORDER BY surname, firstname
                LIMIT %s
                """,
                (like,) * 8 + (int(limit),),
            )
            return fetchall(cur)

    def stats(self) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total,
                       COUNT(CASE WHEN gender='Male' THEN 1 END) AS male,
                       COUNT(CASE WHEN gender='Female' THEN 1 END) AS female
                FROM employees
                """
            )
            row = fetchone(cur) or {}
            return {k: int(row.get(k) or 0) for k in ("total", "male", "female")}

    def get_by_objid(self, objid: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_DETAIL_SELECT + " WHERE e.objid=%s", (objid,))
            return fetchone(cur)

    def get_objid_by_dtruserid(self, dtruserid: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT objid FROM employees WHERE dtruserid=%s LIMIT 1", (dtruserid,))
            row = fetchone(cur)
            return row["objid"] if row else None

    def list_objids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT objid FROM employees ORDER BY surname, firstname")
            return [r["objid"] for r in fetchall(cur)]

    def load_pds_snapshot(self, objid: str) -> Optional[PdsSnapshot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM employees WHERE objid=%s", (objid,))
            employee = fetchone(cur)
            if not employee:
                return None

            def first(table: str) -> dict:
                cur.execute(f"SELECT * FROM {table} WHERE emp_objid=%s LIMIT 1", (objid,))
                return fetchone(cur) or {}

            def rows(table: str) -> list:
                cur.execute(f"SELECT * FROM {table} WHERE emp_objid=%s", (objid,))
                return fetchall(cur)

            sections = {attr: rows(table) for attr, table in PDS_LIST_SECTIONS.items()}

            cur.execute("SELECT * FROM employee_govid WHERE emp_objid=%s AND status=%s", (objid, "active"))
            government_ids = fetchall(cur)

            return PdsSnapshot(
                employee=employee,
                address=first("employee_address"),
                spouse=first("employee_spouses"),
                media=first("employees_media"),
                government_ids=government_ids,
                **sections,
            )

    def set_pds_progress(self, objid: str, progress: float) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET pdscompleprogress=%s WHERE objid=%s", (progress, objid))

    def list_lookup(self, name: str) -> Sequence[dict]:
        table, columns, order_by = LOOKUPS[name]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {columns} FROM {table} ORDER BY {order_by}")
            return fetchall(cur)
