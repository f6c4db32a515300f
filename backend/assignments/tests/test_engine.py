import datetime
import random
from unittest import mock

from django.test import TestCase
from django.utils import timezone

from academics.models import AttendanceRecord, EnrollmentRecord
from academics.services.identity import StudentNotFound, resolve_by_roll
from assignments.models import Assignment, StudentAssignment
from assignments.services import engine
from assignments.services.eligibility import ThresholdConfig
from question_bank.models import Question


def make_session(date, slot, present=(), absent=(), course='CS301', teacher='Dr Rao'):
    rec = AttendanceRecord.objects.create(date=date, time_slot=slot, course_code=course, teacher_name=teacher)
    rec.present_students.set(present)
    rec.absent_students.set(absent)
    return rec


class EvaluateAndAllocateTests(TestCase):
    def setUp(self):
        self.now = timezone.now()
        self.config = ThresholdConfig(default_requirement=70)
        self.e1 = EnrollmentRecord.objects.create(roll='R1', department='CSE', year='3', course_code='CS301')
        self.e2 = EnrollmentRecord.objects.create(roll='R1', department='CSE', year='3', course_code='MA201')
        self.pool = [
            Question.objects.create(
                code=f'Q{i}', text=f'Question {i}', type='broad', topic='A' if i < 6 else 'B',
                subtopic='general', uploaded_by='faculty@example.edu', faculty_name='Dr Rao',
            ).pk
            for i in range(10)
        ]
        day = datetime.date(2026, 2, 2)
        # R1 attends 3 of 4 CS301 sessions with Dr Rao.
        make_session(day, '9-10AM', present=[self.e1])
        make_session(day, '10-11AM', present=[self.e2])
        make_session(day, '11-12PM', present=[self.e1])
        make_session(day, '2-3PM', absent=[self.e1])

    def make_assignment(self, **kwargs):
        defaults = dict(
            title='Week 3', type=Assignment.TYPE_RANDOMIZED, target_course='CS301', faculty_name='Dr Rao',
            target_departments=['CSE'], target_year='3', question_count=3, question_pool=self.pool,
        )
        defaults.update(kwargs)
        return Assignment.objects.create(**defaults)

    def evaluate(self, student_ref, assignment, seed=1, **kwargs):
        kwargs.setdefault('now', self.now)
        kwargs.setdefault('config', self.config)
        return engine.evaluate_and_allocate(student_ref, assignment.pk, rng=random.Random(seed), **kwargs)

    def test_first_access_allocates_and_later_access_returns_same_set(self):
        assignment = self.make_assignment()
        first = self.evaluate('R1', assignment, seed=1)
        self.assertTrue(first.can_access)
        self.assertEqual((first.attended, first.total, first.percent), (3, 4, 75.0))
        self.assertEqual(len(first.question_ids), 3)

        second = self.evaluate('R1', assignment, seed=99)
        self.assertEqual(second.question_ids, first.question_ids)
        self.assertEqual(StudentAssignment.objects.filter(assignment=assignment).count(), 1)

    def test_any_enrollment_id_reaches_the_same_allocation(self):
        assignment = self.make_assignment()
        via_e1 = self.evaluate(self.e1.pk, assignment, seed=3)
        via_e2 = self.evaluate(self.e2.pk, assignment, seed=4)
        self.assertEqual(via_e1.question_ids, via_e2.question_ids)
        sa = StudentAssignment.objects.get(assignment=assignment)
        self.assertEqual(sa.student_roll, 'R1')
        self.assertEqual(sa.student_id, self.e1.pk)

    def test_stored_set_survives_pool_changes(self):
        assignment = self.make_assignment()
        first = self.evaluate('R1', assignment)
        assignment.question_pool = [qid for qid in self.pool if qid not in first.question_ids]
        assignment.save()
        self.assertEqual(self.evaluate('R1', assignment).question_ids, first.question_ids)

    def test_below_threshold_gets_nothing(self):
        assignment = self.make_assignment()
        result = self.evaluate('R1', assignment, config=ThresholdConfig(default_requirement=70, rules={'CSE_3_CS301': 80}))
        self.assertFalse(result.can_access)
        self.assertEqual(result.required_percent, 80.0)
        self.assertEqual(result.question_ids, [])
        self.assertFalse(StudentAssignment.objects.exists())

    def test_manual_returns_fixed_questions_without_storing(self):
        assignment = self.make_assignment(type=Assignment.TYPE_MANUAL, questions=self.pool[:2], question_pool=[])
        result = self.evaluate('R1', assignment)
        self.assertEqual(result.question_ids, self.pool[:2])
        self.assertIsNone(result.student_assignment)
        self.assertFalse(StudentAssignment.objects.exists())

    def test_batch_uses_bracket_for_attendance(self):
        assignment = self.make_assignment(
            type=Assignment.TYPE_BATCH_ATTENDANCE, question_count=None,
            rules=[{'min': 70, 'max': 100, 'count': 5}, {'min': 0, 'max': 69, 'count': 2}],
            topic_weights=[{'topic': 'A', 'weight': 60}, {'topic': 'B', 'weight': 40}],
        )
        result = self.evaluate('R1', assignment)
        self.assertTrue(result.can_access)
        self.assertEqual(result.required_percent, 0.0)
        self.assertEqual(len(result.question_ids), 5)
        self.assertEqual(len(set(result.question_ids)), 5)

    def test_batch_without_matching_bracket_stores_nothing(self):
        assignment = self.make_assignment(
            type=Assignment.TYPE_BATCH_ATTENDANCE, question_count=None,
            rules=[{'min': 90, 'max': 100, 'count': 5}],
        )
        result = self.evaluate('R1', assignment)
        self.assertTrue(result.can_access)
        self.assertEqual(result.question_ids, [])
        self.assertFalse(StudentAssignment.objects.exists())

    def test_past_deadline_denies_access_and_uses_attendance_at_deadline(self):
        deadline = self.now - datetime.timedelta(days=1)
        # Absence recorded after the deadline must not count.
        make_session(self.now.date(), '9-10AM', absent=[self.e1])
        assignment = self.make_assignment(deadline=deadline)
        result = self.evaluate('R1', assignment)
        self.assertTrue(result.is_past_deadline)
        self.assertFalse(result.can_access)
        self.assertEqual((result.attended, result.total), (3, 4))
        self.assertEqual(result.question_ids, [])
        self.assertFalse(StudentAssignment.objects.exists())

    def test_existing_allocation_hidden_after_deadline(self):
        assignment = self.make_assignment()
        self.evaluate('R1', assignment)
        assignment.deadline = self.now - datetime.timedelta(hours=1)
        assignment.save()
        result = self.evaluate('R1', assignment)
        self.assertEqual(result.question_ids, [])
        self.assertIsNotNone(result.student_assignment)

    def test_not_started_exposes_nothing(self):
        assignment = self.make_assignment(start_time=self.now + datetime.timedelta(hours=2))
        result = self.evaluate('R1', assignment)
        self.assertTrue(result.can_access)
        self.assertFalse(result.has_started)
        self.assertEqual(result.question_ids, [])
        self.assertFalse(StudentAssignment.objects.exists())

    def test_missing_faculty_is_full_attendance(self):
        assignment = self.make_assignment(faculty_name='')
        with self.assertLogs('assignments.services.engine', level='INFO'):
            result = self.evaluate('R1', assignment)
        self.assertEqual((result.attended, result.total, result.percent), (0, 0, 100.0))
        self.assertTrue(result.can_access)

    def test_personalized_for_non_target_student(self):
        other = EnrollmentRecord.objects.create(roll='R2', department='CSE', year='3', course_code='CS301')
        assignment = self.make_assignment(type=Assignment.TYPE_PERSONALIZED, question_count=2)
        assignment.target_students.add(self.e2)

        targeted = self.evaluate(self.e1.pk, assignment)
        self.assertEqual(len(targeted.question_ids), 2)

        outsider = self.evaluate(other.pk, assignment)
        self.assertTrue(outsider.can_access)
        self.assertEqual(outsider.question_ids, [])
        self.assertEqual(StudentAssignment.objects.count(), 1)

    def test_concurrent_insert_converges_on_committed_row(self):
        assignment = self.make_assignment()
        committed = StudentAssignment.objects.create(
            assignment=assignment, student=self.e2, student_roll='R1', question_ids=self.pool[7:10],
        )
        # The first lookup misses as if the other request had not committed yet.
        with mock.patch.object(engine, 'get_existing_allocation', side_effect=[None, committed]):
            result = self.evaluate('R1', assignment)
        self.assertEqual(result.question_ids, self.pool[7:10])
        self.assertEqual(result.student_assignment.pk, committed.pk)
        self.assertEqual(StudentAssignment.objects.filter(assignment=assignment).count(), 1)

    def test_persist_allocation_reports_existing_row(self):
        assignment = self.make_assignment()
        identity = resolve_by_roll('R1')
        sa, created = engine.persist_allocation(assignment, identity, self.pool[:3])
        self.assertTrue(created)
        again, created = engine.persist_allocation(assignment, identity, self.pool[3:6])
        self.assertFalse(created)
        self.assertEqual(again.pk, sa.pk)
        self.assertEqual(again.question_ids, self.pool[:3])

    def test_unknown_references(self):
        assignment = self.make_assignment()
        with self.assertRaises(engine.AssignmentNotFound):
            self.evaluate('R1', Assignment(pk=assignment.pk + 100))
        with self.assertRaises(engine.AssignmentNotFound):
            engine.evaluate_and_allocate('R1', 'abc', config=self.config)
        with self.assertRaises(StudentNotFound):
            self.evaluate('R404', assignment)
