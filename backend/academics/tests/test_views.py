import datetime

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from academics.models import AttendanceRecord, EnrollmentRecord


class StudentAttendanceViewTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username='r1', password='pass1234')
        self.e1 = EnrollmentRecord.objects.create(user=self.user, roll='R1', department='CSE', year='3', course_code='CS301')
        self.e2 = EnrollmentRecord.objects.create(roll='R1', department='CSE', year='3', course_code='MA201', attended_adjustment=1, total_classes_adjustment=1)
        other = EnrollmentRecord.objects.create(roll='R2', department='CSE', year='3', course_code='CS301')

        day = datetime.date(2026, 2, 2)
        rec = AttendanceRecord.objects.create(date=day, time_slot='9-10AM', course_code='CS301', teacher_name='Dr Rao')
        rec.present_students.set([self.e1])
        rec = AttendanceRecord.objects.create(date=day, time_slot='10-11AM', course_code='CS301', teacher_name='Dr Rao')
        rec.absent_students.set([self.e2, other])

        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_summary_merges_enrollment_rows(self):
        res = self.client.get('/api/academics/student/attendance/')
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(data['roll'], 'R1')
        self.assertEqual(len(data['per_course']), 1)
        row = data['per_course'][0]
        self.assertEqual((row['course'], row['faculty']), ('CS301', 'Dr Rao'))
        self.assertEqual((row['attended'], row['total'], row['percent']), (1, 2, 50.0))
        # The MA201 correction shows up under MA201 only.
        self.assertEqual(data['course_totals'], [
            {'course': 'CS301', 'attended': 1, 'total': 2, 'percent': 50.0,
             'adjustments': {'attended': 0, 'total': 0, 'submission': 0}},
            {'course': 'MA201', 'attended': 1, 'total': 1, 'percent': 100.0,
             'adjustments': {'attended': 1, 'total': 1, 'submission': 0}},
        ])
        self.assertEqual(data['overall'], {'attended': 2, 'total': 3, 'percent': 66.7})
        self.assertEqual(data['mass_bunk_count'], 1)
        self.assertEqual(data['mass_bunk_events'][0]['time_slot'], '10-11AM')

    def test_requires_authentication(self):
        self.assertEqual(APIClient().get('/api/academics/student/attendance/').status_code, 401)
