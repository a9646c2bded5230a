from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import DayCreditStrategyFactory
from .attendance.mssql_timelog_repository import MSSQLTimeLogRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository, MySQLComputedDtrRepository
from .attendance.service import AttendanceService
from .biometrics.helper import FingerprintHelper
from .biometrics.mssql_finger_template_repository import MSSQLFingerTemplateRepository
from .biometrics.progress import EnrollmentProgressStore
from .biometrics.service import EnrollmentService
from .database.connection import DBConfig, DatabaseConnection, MSSQLConfig, MSSQLConnection
from .dtr.mssql_dtr_user_repository import MSSQLDTRUserRepository
from .dtr.mysql_portal_user_repository import MySQLPortalUserRepository
from .dtr.service import DTRUserService, PortalUserService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService, PdsService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository, MySQLHolidayTypeRepository
from .holidays.service import HolidayService
from .machines.mssql_machine_repository import MSSQLCheckInOutRepository, MSSQLMachineRepository
from .machines.service import MachineService, MachineSyncService
from .media.mysql_media_repository import MySQLMediaRepository
from .media.service import MediaService
from .media.storage import MediaStorage
from .payroll.service import PayrollReportService
from .shifts.mysql_shift_repository import MySQLShiftAssignmentRepository, MySQLShiftTypeRepository
from .shifts.service import ShiftAssignmentService, ShiftService
from .users.mysql_user_repository import MySQLPermissionRepository, MySQLUserRepository
from .users.service import AuthService, PermissionService


@dataclass(frozen=True)
class AppSettings:
    media_root: str
    biometric_helper: str
    biometric_helper_timeout: int = 120
    machine_timeout: int = 5
    session_days: int = 1
    debug: bool = False


@dataclass(frozen=True)
class Container:
    settings: AppSettings
    hr201: DatabaseConnection
    dtr: MSSQLConnection

    auth_service: AuthService
    permission_service: PermissionService
    employee_service: EmployeeService
    pds_service: PdsService
    media_service: MediaService
    dtr_user_service: DTRUserService
    portal_user_service: PortalUserService
    enrollment_service: EnrollmentService
    machine_service: MachineService
    machine_sync_service: MachineSyncService
    shift_service: ShiftService
    shift_assignment_service: ShiftAssignmentService
    holiday_service: HolidayService
    attendance_service: AttendanceService
    payroll_report_service: PayrollReportService


def build_container(*, hr201_config: dict, dtr_config: dict, settings: AppSettings) -> Container:
    hr201 = DatabaseConnection.get_instance(
        DBConfig(
            host=str(hr201_config["host"]),
            port=int(hr201_config.get("port", 3306)),
            user=str(hr201_config["user"]),
            password=str(hr201_config["password"]),
            database=str(hr201_config["database"]),
        )
    )
    dtr = MSSQLConnection.get_instance(
        MSSQLConfig(
            server=str(dtr_config["server"]),
            port=int(dtr_config.get("port", 1433)),
            user=str(dtr_config["user"]),
            password=str(dtr_config["password"]),
            database=str(dtr_config["database"]),
            driver=str(dtr_config.get("driver") or "ODBC Driver 18 for SQL Server"),
            encrypt=bool(dtr_config.get("encrypt", False)),
        )
    )

    storage = MediaStorage(settings.media_root)
    employees_repo = MySQLEmployeeRepository(hr201)
    dtr_users_repo = MSSQLDTRUserRepository(dtr)
    machines_repo = MSSQLMachineRepository(dtr)
    computed_repo = MySQLComputedDtrRepository(hr201)
    shifts_repo = MySQLShiftTypeRepository(hr201)

    helper = FingerprintHelper(settings.biometric_helper, timeout=settings.biometric_helper_timeout)

    return Container(
        settings=settings,
        hr201=hr201,
        dtr=dtr,
        auth_service=AuthService(MySQLUserRepository(hr201)),
        permission_service=PermissionService(MySQLPermissionRepository(hr201)),
        employee_service=EmployeeService(employees_repo, storage),
        pds_service=PdsService(employees_repo),
        media_service=MediaService(MySQLMediaRepository(hr201), storage),
        dtr_user_service=DTRUserService(dtr_users_repo),
        portal_user_service=PortalUserService(MySQLPortalUserRepository(hr201), dtr_users_repo),
        enrollment_service=EnrollmentService(
            MSSQLFingerTemplateRepository(dtr), helper, EnrollmentProgressStore()
        ),
        machine_service=MachineService(machines_repo),
        machine_sync_service=MachineSyncService(
            machines_repo, MSSQLCheckInOutRepository(dtr), timeout=settings.machine_timeout
        ),
        shift_service=ShiftService(shifts_repo),
        shift_assignment_service=ShiftAssignmentService(MySQLShiftAssignmentRepository(hr201), shifts_repo),
        holiday_service=HolidayService(MySQLHolidayRepository(hr201), MySQLHolidayTypeRepository(hr201)),
        attendance_service=AttendanceService(
            MySQLAttendanceRepository(hr201),
            MSSQLTimeLogRepository(dtr),
            employees_repo,
            computed_repo,
            strategy_factory=DayCreditStrategyFactory(),
        ),
        payroll_report_service=PayrollReportService(computed_repo),
    )
