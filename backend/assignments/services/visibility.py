"""Which assignments a student should see in their list."""
from typing import List

from academics.models import EnrollmentRecord
from academics.services.identity import StudentIdentity
from academics.utils import normalize_course_code
from assignments.models import Assignment, StudentAssignment


def _targets_cohort(assignment: Assignment, department: str, year: str, course_keys) -> bool:
    if department not in (assignment.target_departments or []):
        return False
    if assignment.target_year and assignment.target_year == year:
        return True
    return normalize_course_code(assignment.target_course) in course_keys


def visible_assignments(identity: StudentIdentity) -> List[Assignment]:
    """Assignments targeting the student's cohort plus personalized ones naming them.

    Cohort matching requires the student's department in `target_departments`
    and either the same year or one of the student's enrolled courses.
    Newest first, without duplicates.
    """
    course_keys = {
        normalize_course_code(c)
        for c in EnrollmentRecord.objects.filter(pk__in=identity.internal_ids).values_list('course_code', flat=True)
    }
    course_keys.discard('')

    picked = {}
    for assignment in Assignment.objects.exclude(type=Assignment.TYPE_PERSONALIZED):
        if _targets_cohort(assignment, identity.department, identity.year, course_keys):
            picked[assignment.pk] = assignment

    personalized = Assignment.objects.filter(type=Assignment.TYPE_PERSONALIZED, target_students__in=identity.internal_ids)
    allocated = Assignment.objects.filter(
        type=Assignment.TYPE_PERSONALIZED,
        pk__in=StudentAssignment.objects.filter(student_roll=identity.roll).values('assignment_id'),
    )
    for assignment in list(personalized) + list(allocated):
        picked.setdefault(assignment.pk, assignment)

    return sorted(picked.values(), key=lambda a: (a.created_at, a.pk), reverse=True)
