"""Assignment evaluation: attendance gate plus lazy, at-most-once allocation.

`evaluate_and_allocate` is the single entry point used by the student
assignment views. The only write it performs is the first-time insert of a
StudentAssignment; concurrent first accesses converge on whichever insert
committed first through the (assignment, student_roll) unique constraint.
"""
import datetime
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from academics.models import EnrollmentRecord
from academics.services.attendance import AttendanceResult, compute_attendance
from academics.services.identity import StudentIdentity, resolve_identity
from academics.utils import normalize_course_code
from assignments.models import Assignment, StudentAssignment
from assignments.services import allocator
from assignments.services.eligibility import ThresholdConfig, evaluate_eligibility, load_threshold_config

logger = logging.getLogger(__name__)


class AssignmentNotFound(NotFound):
    default_detail = 'Assignment not found.'
    default_code = 'assignment_not_found'


@dataclass(frozen=True)
class EvaluationResult:
    identity: StudentIdentity
    assignment: Assignment
    can_access: bool
    required_percent: float
    attended: int
    total: int
    percent: float
    is_past_deadline: bool
    has_started: bool
    question_ids: List[int] = field(default_factory=list)
    student_assignment: Optional[StudentAssignment] = None


def get_assignment(assignment_ref) -> Assignment:
    if isinstance(assignment_ref, Assignment):
        return assignment_ref
    try:
        assignment = Assignment.objects.filter(pk=int(assignment_ref)).first()
    except (TypeError, ValueError):
        assignment = None
    if assignment is None:
        raise AssignmentNotFound(f'Assignment {assignment_ref} not found.')
    return assignment


def get_existing_allocation(assignment: Assignment, identity: StudentIdentity) -> Optional[StudentAssignment]:
    return StudentAssignment.objects.filter(assignment=assignment, student_roll=identity.roll).first()


def _owning_enrollment_id(assignment: Assignment, identity: StudentIdentity) -> int:
    """Prefer the enrollment row of the assignment's course, else the primary row."""
    wanted = normalize_course_code(assignment.target_course)
    if wanted:
        rows = EnrollmentRecord.objects.filter(pk__in=identity.internal_ids).values_list('pk', 'course_code')
        for pk, course_code in sorted(rows):
            if normalize_course_code(course_code) == wanted:
                return pk
    return identity.primary_id or min(identity.internal_ids)


def persist_allocation(assignment: Assignment, identity: StudentIdentity, question_ids: List[int]):
    """Insert the allocation, or return the row a concurrent request committed.

    Returns ``(student_assignment, created)``.
    """
    try:
        with transaction.atomic():
            sa = StudentAssignment.objects.create(
                assignment=assignment,
                student_id=_owning_enrollment_id(assignment, identity),
                student_roll=identity.roll,
                question_ids=list(question_ids),
            )
    except IntegrityError:
        existing = get_existing_allocation(assignment, identity)
        if existing is None:
            raise
        logger.info('Allocation race for roll=%s assignment=%s resolved to existing row=%s', identity.roll, assignment.pk, existing.pk)
        return existing, False

    logger.info('Allocated %d questions to roll=%s assignment=%s', len(sa.question_ids), identity.roll, assignment.pk)
    return sa, True


def assignment_attendance(assignment: Assignment, identity: StudentIdentity,
                          as_of: Optional[datetime.datetime] = None) -> AttendanceResult:
    course_code = assignment.target_course
    faculty_name = assignment.faculty_name
    if not course_code or not faculty_name:
        logger.info(
            'Assignment %s has no course/faculty (course=%r faculty=%r); attendance not computed',
            assignment.pk, course_code, faculty_name,
        )
        return AttendanceResult(attended=0, total=0, percent=100.0)
    return compute_attendance(identity, course_code, faculty_name=faculty_name, as_of=as_of)


def evaluate_and_allocate(student_ref, assignment_ref, now: Optional[datetime.datetime] = None,
                          rng=None, config: Optional[ThresholdConfig] = None) -> EvaluationResult:
    """Resolve access to an assignment for a student and materialize questions.

    Questions are only exposed while the assignment is open (started, not past
    its deadline) and the attendance gate passes. An existing allocation is
    always returned as stored.
    """
    identity = resolve_identity(student_ref)
    assignment = get_assignment(assignment_ref)
    config = config or load_threshold_config()
    now = now or timezone.now()

    is_past_deadline = assignment.is_past_deadline(now)
    has_started = assignment.has_started(now)

    # After the deadline, attendance is judged as it stood at the deadline.
    as_of = assignment.deadline if is_past_deadline else None
    attendance = assignment_attendance(assignment, identity, as_of=as_of)

    eligibility = evaluate_eligibility(
        attendance.percent,
        identity.department,
        identity.year,
        assignment.target_course,
        config,
        assignment=assignment,
    )
    can_access = eligibility.can_access and not is_past_deadline

    student_assignment = get_existing_allocation(assignment, identity)
    question_ids: List[int] = []
    if can_access and has_started:
        if student_assignment is not None:
            question_ids = list(student_assignment.question_ids or [])
        elif assignment.type == Assignment.TYPE_MANUAL:
            question_ids = list(assignment.questions or [])
        else:
            selected = allocator.allocate(assignment, identity, attendance.percent, rng=rng)
            if selected:
                student_assignment, _ = persist_allocation(assignment, identity, selected)
                question_ids = list(student_assignment.question_ids or [])

    return EvaluationResult(
        identity=identity,
        assignment=assignment,
        can_access=can_access,
        required_percent=eligibility.required_percent,
        attended=attendance.attended,
        total=attendance.total,
        percent=attendance.percent,
        is_past_deadline=is_past_deadline,
        has_started=has_started,
        question_ids=question_ids,
        student_assignment=student_assignment,
    )
