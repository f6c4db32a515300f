"""Attendance aggregation for a merged student identity.

Course codes and faculty names on attendance rows are free text, so every
comparison goes through `academics.utils` normalization. "Total classes" for a
student means the sessions in which any of the student's enrollment ids was
recorded (present or absent), never every session on the calendar.
"""
import datetime
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional

from academics.models import AttendanceRecord
from academics.services.identity import StudentIdentity, resolve_identity
from academics.services.ledger import Adjustments, get_adjustments, get_course_adjustments
from academics.utils import normalize_course_code, normalize_faculty_name, session_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    pk: int
    date: datetime.date
    time_slot: str
    course_code: str
    teacher_name: str
    present: FrozenSet[int] = frozenset()
    absent: FrozenSet[int] = frozenset()

    @property
    def course_key(self) -> str:
        return normalize_course_code(self.course_code)

    @property
    def teacher_key(self) -> str:
        return normalize_faculty_name(self.teacher_name)

    @property
    def timestamp(self) -> datetime.datetime:
        return session_timestamp(self.date, self.time_slot)

    @property
    def is_mass_bunk(self) -> bool:
        return not self.present and bool(self.absent)

    def participated(self, ids: Iterable[int]) -> bool:
        ids = set(ids)
        return bool(ids & self.present) or bool(ids & self.absent)

    def attended(self, ids: Iterable[int]) -> bool:
        return bool(set(ids) & self.present)

    def as_event(self) -> dict:
        return {
            'date': self.date,
            'time_slot': self.time_slot,
            'course_code': self.course_code,
            'teacher_name': self.teacher_name,
        }


@dataclass(frozen=True)
class AttendanceResult:
    attended: int
    total: int
    percent: float


@dataclass(frozen=True)
class CourseAttendance:
    course: str
    faculty: str
    attended: int
    total: int
    percent: float


@dataclass(frozen=True)
class CourseTotal:
    course: str
    attended: int
    total: int
    percent: float
    adjustments: Adjustments = field(default_factory=Adjustments)


@dataclass(frozen=True)
class AttendanceSummary:
    roll: str
    per_course: List[CourseAttendance] = field(default_factory=list)
    course_totals: List[CourseTotal] = field(default_factory=list)
    overall: AttendanceResult = field(default_factory=lambda: AttendanceResult(attended=0, total=0, percent=100.0))
    mass_bunk_count: int = 0
    mass_bunk_events: List[dict] = field(default_factory=list)


def attendance_percent(attended: int, total: int) -> float:
    """Percentage of `attended` over `total`, clamped into [0, 100].

    A student with no real or adjusted class history defaults to 100 so new
    students are never blocked before attendance exists.
    """
    if total <= 0:
        return 100.0
    return max(0.0, min(100.0, attended / total * 100))


def load_sessions(course_code: Optional[str] = None, faculty_name: Optional[str] = None) -> List[Session]:
    """Read attendance rows, optionally narrowed by normalized course and faculty.

    Course/faculty matching happens in Python because the stored values are
    not normalized.
    """
    wanted_course = normalize_course_code(course_code) if course_code else None
    wanted_faculty = normalize_faculty_name(faculty_name) if faculty_name is not None else None

    rows = []
    for rec in AttendanceRecord.objects.values('pk', 'date', 'time_slot', 'course_code', 'teacher_name'):
        if wanted_course is not None and normalize_course_code(rec['course_code']) != wanted_course:
            continue
        if wanted_faculty is not None and normalize_faculty_name(rec['teacher_name']) != wanted_faculty:
            continue
        rows.append(rec)
    if not rows:
        return []

    pks = [r['pk'] for r in rows]
    present = defaultdict(set)
    absent = defaultdict(set)
    PresentLink = AttendanceRecord.present_students.through
    AbsentLink = AttendanceRecord.absent_students.through
    for rec_id, student_id in PresentLink.objects.filter(attendancerecord_id__in=pks).values_list('attendancerecord_id', 'enrollmentrecord_id'):
        present[rec_id].add(student_id)
    for rec_id, student_id in AbsentLink.objects.filter(attendancerecord_id__in=pks).values_list('attendancerecord_id', 'enrollmentrecord_id'):
        absent[rec_id].add(student_id)

    return [
        Session(
            pk=r['pk'],
            date=r['date'],
            time_slot=r['time_slot'] or '',
            course_code=r['course_code'] or '',
            teacher_name=r['teacher_name'] or '',
            present=frozenset(present[r['pk']]),
            absent=frozenset(absent[r['pk']]),
        )
        for r in rows
    ]


def compute_attendance(
    identity: StudentIdentity,
    course_code: str,
    faculty_name: Optional[str] = None,
    as_of: Optional[datetime.datetime] = None,
    sessions: Optional[List[Session]] = None,
    adjustments: Optional[Adjustments] = None,
) -> AttendanceResult:
    """Attended/total/percent for `identity` in one course, after corrections.

    `sessions` may be passed in to reuse an already loaded snapshot; it is
    filtered here again so callers can hand over a wider set.
    """
    course_key = normalize_course_code(course_code)
    if not course_key:
        logger.info('Attendance requested without a course for roll=%s; defaulting to full attendance', identity.roll)
        return AttendanceResult(attended=0, total=0, percent=100.0)

    if sessions is None:
        sessions = load_sessions(course_code, faculty_name)

    faculty_key = normalize_faculty_name(faculty_name) if faculty_name is not None else None
    ids = identity.internal_ids
    total = attended = 0
    for s in sessions:
        if s.course_key != course_key:
            continue
        if faculty_key is not None and s.teacher_key != faculty_key:
            continue
        if as_of is not None and s.timestamp > as_of:
            continue
        if not s.participated(ids):
            continue
        total += 1
        if s.attended(ids):
            attended += 1

    if adjustments is None:
        adjustments = get_adjustments(identity, course_code)
    attended += adjustments.attended
    total += adjustments.total

    return AttendanceResult(attended=attended, total=total, percent=attendance_percent(attended, total))


def mass_bunk_sessions(course_code: str, sessions: Optional[List[Session]] = None) -> List[Session]:
    """Sessions of `course_code` where nobody was present and someone was absent."""
    course_key = normalize_course_code(course_code)
    if sessions is None:
        sessions = load_sessions(course_code)
    found = [s for s in sessions if s.course_key == course_key and s.is_mass_bunk]
    found.sort(key=lambda s: (s.date, s.timestamp))
    return found


def compute_attendance_summary(student_ref) -> AttendanceSummary:
    """Per-course/per-faculty attendance plus mass-bunk events for a student.

    Faculty rows carry recorded sessions only. Manual corrections belong to a
    course, so they are applied once per course in `course_totals`, which
    also lists courses that have corrections but no sessions yet. `overall`
    sums every course total. Read-only dashboard query.
    """
    identity = resolve_identity(student_ref)
    sessions = load_sessions()
    ids = identity.internal_ids

    groups: Dict[tuple, str] = {}
    courses: Dict[str, str] = {}
    for s in sessions:
        if not s.participated(ids):
            continue
        courses.setdefault(s.course_key, s.course_code)
        groups.setdefault((s.course_key, s.teacher_key), s.teacher_name)

    no_adjustments = Adjustments()
    per_course = []
    for key in sorted(groups):
        course_label, teacher_label = courses[key[0]], groups[key]
        result = compute_attendance(
            identity,
            course_label,
            faculty_name=teacher_label,
            sessions=sessions,
            adjustments=no_adjustments,
        )
        per_course.append(CourseAttendance(
            course=course_label,
            faculty=teacher_label or 'Unknown Faculty',
            attended=result.attended,
            total=result.total,
            percent=result.percent,
        ))

    course_adjustments = get_course_adjustments(identity)
    course_totals = []
    for course_key in sorted(set(courses) | set(course_adjustments)):
        adj = course_adjustments.get(course_key, no_adjustments)
        result = compute_attendance(
            identity,
            courses.get(course_key, course_key),
            sessions=sessions,
            adjustments=adj,
        )
        course_totals.append(CourseTotal(
            course=courses.get(course_key, course_key),
            attended=result.attended,
            total=result.total,
            percent=result.percent,
            adjustments=adj,
        ))

    attended = sum(c.attended for c in course_totals)
    total = sum(c.total for c in course_totals)

    events = []
    for course_key in sorted(courses):
        events.extend(s.as_event() for s in mass_bunk_sessions(courses[course_key], sessions=sessions))

    return AttendanceSummary(
        roll=identity.roll,
        per_course=per_course,
        course_totals=course_totals,
        overall=AttendanceResult(attended=attended, total=total, percent=attendance_percent(attended, total)),
        mass_bunk_count=len(events),
        mass_bunk_events=events,
    )
