import datetime

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from academics.models import AttendanceRecord, EnrollmentRecord
from assignments.models import Assignment, FacultyConfig, StudentAssignment
from question_bank.models import Question


class StudentAssignmentViewTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username='r1', password='pass1234')
        self.e1 = EnrollmentRecord.objects.create(user=self.user, roll='R1', name='Asha', department='CSE', year='3', course_code='CS301')
        self.e2 = EnrollmentRecord.objects.create(roll='R1', name='Asha', department='CSE', year='3', course_code='MA201')
        self.pool = [
            Question.objects.create(
                code=f'Q{i}', text=f'Question {i}', type='broad', topic='A',
                subtopic='general', uploaded_by='faculty@example.edu', faculty_name='Dr Rao',
            ).pk
            for i in range(5)
        ]
        rec = AttendanceRecord.objects.create(date=datetime.date(2026, 2, 2), time_slot='9-10AM', course_code='CS301', teacher_name='Dr Rao')
        rec.present_students.set([self.e2])
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_detail_allocates_questions_once(self):
        assignment = Assignment.objects.create(
            title='Week 1', type='randomized', target_course='CS301', faculty_name='Dr Rao',
            target_departments=['CSE'], target_year='3', question_count=2, question_pool=self.pool,
        )
        FacultyConfig.objects.create(faculty_name='Dr Rao', course='cs-301', script_url='https://scripts.example.edu/rao')

        res = self.client.get(f'/api/assignments/student/{assignment.pk}/')
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(len(data['questions']), 2)
        self.assertEqual(data['attendance'], {'percent': 100.0, 'total_classes': 1, 'attended_classes': 1, 'faculty_name': 'Dr Rao'})
        self.assertTrue(data['access']['can_access'])
        self.assertEqual(data['access']['required_attendance'], 70.0)
        self.assertEqual(data['submission'], {'status': 'pending', 'submitted_at': None})
        self.assertEqual(data['script_url'], 'https://scripts.example.edu/rao')
        self.assertEqual(data['student']['roll'], 'R1')

        again = self.client.get(f'/api/assignments/student/{assignment.pk}/').json()
        self.assertEqual([q['id'] for q in again['questions']], [q['id'] for q in data['questions']])
        self.assertEqual(StudentAssignment.objects.count(), 1)

    def test_detail_for_unknown_assignment(self):
        res = self.client.get('/api/assignments/student/9999/')
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()['status_code'], 404)

    def test_user_without_enrollment(self):
        stranger = get_user_model().objects.create_user(username='guest', password='pass1234')
        self.client.force_authenticate(user=stranger)
        self.assertEqual(self.client.get('/api/assignments/student/').status_code, 404)

    def test_requires_authentication(self):
        self.assertEqual(APIClient().get('/api/assignments/student/').status_code, 401)

    def test_list_shows_cohort_and_personalized(self):
        cohort = Assignment.objects.create(title='Cohort', type='manual', target_departments=['CSE'], target_year='3')
        by_course = Assignment.objects.create(title='By course', type='manual', target_departments=['CSE'], target_year='2', target_course='MA-201')
        Assignment.objects.create(title='Other dept', type='manual', target_departments=['ECE'], target_year='3')
        personal = Assignment.objects.create(title='Remedial', type='personalized', question_count=1, question_pool=self.pool)
        personal.target_students.add(self.e2)
        Assignment.objects.create(title='Someone else', type='personalized', question_count=1, question_pool=self.pool)
        StudentAssignment.objects.create(assignment=cohort, student=self.e1, student_roll='R1', question_ids=[])

        res = self.client.get('/api/assignments/student/')
        self.assertEqual(res.status_code, 200)
        titles = {row['title']: row for row in res.json()}
        self.assertEqual(set(titles), {'Cohort', 'By course', 'Remedial'})
        self.assertEqual(titles['Cohort']['allocation'], {'status': 'pending', 'submitted_at': None})
        self.assertIsNone(titles['By course']['allocation'])
