"""
Management command to print a student's merged attendance and mass-bunk sessions
Usage: python manage.py attendance_summary <roll>
"""
from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import NotFound

from academics.services.attendance import compute_attendance_summary


class Command(BaseCommand):
    help = 'Show course/faculty-wise attendance for a roll number across all its enrollment rows'

    def add_arguments(self, parser):
        parser.add_argument('roll', help='Roll number of the student')

    def handle(self, *args, **options):
        roll = options['roll']
        try:
            summary = compute_attendance_summary(roll)
        except NotFound as exc:
            raise CommandError(str(exc.detail))

        self.stdout.write(self.style.SUCCESS(f'\nAttendance for {summary.roll}:\n'))
        self.stdout.write('-' * 80)

        if not summary.per_course:
            self.stdout.write(self.style.WARNING('No attendance recorded yet.'))

        for row in summary.per_course:
            self.stdout.write(f'  {row.course:<12} {row.faculty:<30} {row.attended:>4}/{row.total:<4} {row.percent:6.1f}%')

        self.stdout.write('\nCourse totals (with manual adjustments):')
        for course in summary.course_totals:
            adj = course.adjustments
            self.stdout.write(
                f'  {course.course:<12} {course.attended:>4}/{course.total:<4} {course.percent:6.1f}%'
                f'  adj attended {adj.attended:+d}, total {adj.total:+d}, submissions {adj.submission:+d}'
            )
        overall = summary.overall
        self.stdout.write(f'Overall: {overall.attended}/{overall.total} ({overall.percent:.1f}%)')

        self.stdout.write('\n' + '-' * 80)
        self.stdout.write(self.style.HTTP_INFO(f'Mass bunks: {summary.mass_bunk_count}'))
        for ev in summary.mass_bunk_events:
            self.stdout.write(f"  {ev['date']} {ev['time_slot']:<8} {ev['course_code']} ({ev['teacher_name']})")
