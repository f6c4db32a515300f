from .identity import StudentIdentity, StudentNotFound, resolve_by_id, resolve_by_roll, resolve_for_user, resolve_identity  # noqa: F401
from .ledger import Adjustments, get_adjustments, get_course_adjustments  # noqa: F401
from .attendance import (  # noqa: F401
    AttendanceResult,
    AttendanceSummary,
    CourseAttendance,
    CourseTotal,
    attendance_percent,
    compute_attendance,
    compute_attendance_summary,
    load_sessions,
    mass_bunk_sessions,
)
