"""Read-only view over manual attendance and submission corrections."""
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict

from academics.models import EnrollmentRecord
from academics.services.identity import StudentIdentity
from academics.utils import normalize_course_code


@dataclass(frozen=True)
class Adjustments:
    attended: int = 0
    total: int = 0
    submission: int = 0


def _rows(identity: StudentIdentity):
    return EnrollmentRecord.objects.filter(pk__in=identity.internal_ids).only(
        'course_code', 'attended_adjustment', 'total_classes_adjustment', 'submission_adjustments',
    )


def get_adjustments(identity: StudentIdentity, course_code: str = '') -> Adjustments:
    """Sum corrections over every enrollment row of `identity`.

    Corrections may have been entered against whichever row existed at the
    time, so all rows contribute. Values are not clamped.
    """
    wanted = normalize_course_code(course_code)
    attended = total = submission = 0
    for row in _rows(identity):
        attended += row.attended_adjustment or 0
        total += row.total_classes_adjustment or 0
        if wanted:
            for course, value in (row.submission_adjustments or {}).items():
                if normalize_course_code(course) == wanted:
                    submission += int(value or 0)
    return Adjustments(attended=attended, total=total, submission=submission)


def get_course_adjustments(identity: StudentIdentity) -> Dict[str, Adjustments]:
    """Corrections per normalized course code.

    Attended/total corrections belong to the course of the row they were
    entered on; submission corrections are keyed by course inside each row.
    Courses whose corrections are all zero are left out.
    """
    attended = defaultdict(int)
    total = defaultdict(int)
    submission = defaultdict(int)
    for row in _rows(identity):
        key = normalize_course_code(row.course_code)
        attended[key] += row.attended_adjustment or 0
        total[key] += row.total_classes_adjustment or 0
        for course, value in (row.submission_adjustments or {}).items():
            submission[normalize_course_code(course)] += int(value or 0)

    out = {}
    for key in sorted(set(attended) | set(submission)):
        adj = Adjustments(attended=attended[key], total=total[key], submission=submission[key])
        if key and adj != Adjustments():
            out[key] = adj
    return out
