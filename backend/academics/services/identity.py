"""Identity resolution across enrollment rows.

A student enrolled in several courses owns one EnrollmentRecord per course,
each with a distinct primary key. Attendance, adjustments and allocations may
have been recorded against any of them, so every engine query starts by
merging the rows that share a roll number into one StudentIdentity.
"""
import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

from rest_framework.exceptions import NotFound

from academics.models import EnrollmentRecord

logger = logging.getLogger(__name__)


class StudentNotFound(NotFound):
    default_detail = 'Student not found.'
    default_code = 'student_not_found'


@dataclass(frozen=True)
class StudentIdentity:
    roll: str
    internal_ids: FrozenSet[int]
    department: str
    year: str
    primary_id: Optional[int] = None


def _build_identity(roll: str, primary: Optional[EnrollmentRecord] = None) -> StudentIdentity:
    rows = list(EnrollmentRecord.objects.filter(roll=roll).order_by('pk'))
    if not rows:
        raise StudentNotFound(f'No enrollment found for roll {roll}.')
    if primary is None:
        primary = rows[0]

    profiles = {(r.department, r.year) for r in rows}
    if len(profiles) > 1:
        # Not reconciled; the primary row wins.
        logger.warning(
            'Enrollment rows disagree for roll=%s profiles=%s using department=%s year=%s',
            roll, sorted(profiles), primary.department, primary.year,
        )

    return StudentIdentity(
        roll=roll,
        internal_ids=frozenset(r.pk for r in rows),
        department=primary.department,
        year=primary.year,
        primary_id=primary.pk,
    )


def resolve_by_roll(roll: str) -> StudentIdentity:
    roll = (roll or '').strip()
    if not roll:
        raise StudentNotFound('Roll number is required.')
    return _build_identity(roll)


def resolve_by_id(enrollment_id) -> StudentIdentity:
    """Resolve from any single enrollment pk; department/year come from that row."""
    row = EnrollmentRecord.objects.filter(pk=enrollment_id).first()
    if row is None:
        raise StudentNotFound(f'No enrollment with id {enrollment_id}.')
    return _build_identity(row.roll, primary=row)


def resolve_identity(student_ref) -> StudentIdentity:
    """Resolve a StudentIdentity from a flexible reference.

    Accepts an existing StudentIdentity, an EnrollmentRecord instance, an
    integer enrollment pk, or a roll string.
    """
    if isinstance(student_ref, StudentIdentity):
        return student_ref
    if isinstance(student_ref, EnrollmentRecord):
        return _build_identity(student_ref.roll, primary=student_ref)
    if isinstance(student_ref, int) and not isinstance(student_ref, bool):
        return resolve_by_id(student_ref)
    if isinstance(student_ref, str):
        return resolve_by_roll(student_ref)
    raise StudentNotFound(f'Unsupported student reference {student_ref!r}.')


def resolve_for_user(user) -> StudentIdentity:
    """Resolve the identity linked to an authenticated user."""
    row = EnrollmentRecord.objects.filter(user=user).order_by('pk').first() if user is not None else None
    if row is None:
        raise StudentNotFound('No student profile is linked to this account.')
    return _build_identity(row.roll, primary=row)
