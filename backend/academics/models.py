from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class EnrollmentRecord(models.Model):
    """One stored row per (roll, course).

    The same physical student may own several rows (one per enrolled
    course), each with its own primary key. Attendance and allocations may
    reference any of them; `academics.services.identity` merges them back
    into one identity by `roll`.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='enrollments')
    roll = models.CharField(max_length=64, db_index=True)
    name = models.CharField(max_length=255, blank=True)
    department = models.CharField(max_length=64)
    year = models.CharField(max_length=16)
    course_code = models.CharField(max_length=64)

    # Manual corrections entered by faculty/admin. May be negative.
    attended_adjustment = models.IntegerField(default=0)
    total_classes_adjustment = models.IntegerField(default=0)
    submission_adjustments = models.JSONField(default=dict, blank=True)

    login_disabled = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Enrollment Record'
        verbose_name_plural = 'Enrollment Records'
        unique_together = (('roll', 'course_code'),)
        ordering = ('roll', 'pk')

    def clean(self):
        adjustments = self.submission_adjustments or {}
        if not isinstance(adjustments, dict):
            raise ValidationError({'submission_adjustments': 'Must be a mapping of course code to integer.'})
        for course, value in adjustments.items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError({'submission_adjustments': f'Adjustment for {course} must be an integer.'})

    def __str__(self):
        return f"{self.roll} ({self.course_code})"


class AttendanceRecord(models.Model):
    """A single class session for a (date, time slot, course, faculty).

    `course_code` and `teacher_name` are free text as typed by faculty and
    are normalized at comparison time, not on save.
    """
    date = models.DateField()
    time_slot = models.CharField(max_length=32, blank=True)
    course_code = models.CharField(max_length=64)
    teacher_name = models.CharField(max_length=255, blank=True)
    present_students = models.ManyToManyField(EnrollmentRecord, blank=True, related_name='present_in')
    absent_students = models.ManyToManyField(EnrollmentRecord, blank=True, related_name='absent_in')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Attendance Record'
        verbose_name_plural = 'Attendance Records'
        unique_together = (('date', 'time_slot', 'course_code', 'teacher_name'),)
        ordering = ('-date', 'time_slot')

    def validate_membership(self, present_ids, absent_ids):
        overlap = set(present_ids) & set(absent_ids)
        if overlap:
            raise ValidationError(f'Students {sorted(overlap)} cannot be both present and absent in one session.')

    def clean(self):
        if self.pk:
            self.validate_membership(
                self.present_students.values_list('pk', flat=True),
                self.absent_students.values_list('pk', flat=True),
            )

    def __str__(self):
        return f"{self.course_code} | {self.teacher_name} @ {self.date} {self.time_slot}"


class AttendancePolicy(models.Model):
    """Process-wide attendance thresholds maintained by administrators.

    `rules` maps ``"{department}_{year}_{course}"`` to a required percentage.
    Only the most recently updated row is used.
    """
    default_requirement = models.FloatField(default=70)
    rules = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Attendance Policy'
        verbose_name_plural = 'Attendance Policies'

    def clean(self):
        if not 0 <= self.default_requirement <= 100:
            raise ValidationError({'default_requirement': 'Must be between 0 and 100.'})
        if not isinstance(self.rules, dict):
            raise ValidationError({'rules': 'Must be a mapping of "{dept}_{year}_{course}" to a percentage.'})
        for key, value in self.rules.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError({'rules': f'Requirement for {key} must be a number.'})

    def __str__(self):
        return f"AttendancePolicy default={self.default_requirement} rules={len(self.rules or {})}"
