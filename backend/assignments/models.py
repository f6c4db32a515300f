from collections import defaultdict

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


ASSIGNMENT_TYPE_CHOICES = (
    ('manual', 'Manual'),
    ('randomized', 'Randomized'),
    ('batch_attendance', 'Batch (Attendance Based)'),
    ('personalized', 'Personalized'),
)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _id_list_errors(value, label):
    if not isinstance(value, list):
        return [f'{label} must be a list of question ids.']
    if any(isinstance(v, bool) or not isinstance(v, int) for v in value):
        return [f'{label} must contain integer question ids only.']
    return []


class Assignment(models.Model):
    """An assignment and the strategy used to pick each student's questions.

    Strategy parameters live in JSON fields so one table holds every type:

    - manual: `questions` is the fixed, ordered list shown to everyone.
    - randomized: `question_count` drawn uniformly from `question_pool`.
    - batch_attendance: `rules` is a list of ``{min, max, count}`` attendance
      brackets and `topic_weights` a list of ``{topic, weight}`` percentages.
    - personalized: `question_count` drawn from `question_pool`, only for
      `target_students`.
    """
    TYPE_MANUAL = 'manual'
    TYPE_RANDOMIZED = 'randomized'
    TYPE_BATCH_ATTENDANCE = 'batch_attendance'
    TYPE_PERSONALIZED = 'personalized'

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    type = models.CharField(max_length=32, choices=ASSIGNMENT_TYPE_CHOICES, default=TYPE_MANUAL)

    target_course = models.CharField(max_length=64, blank=True, default='')
    target_departments = models.JSONField(default=list, blank=True)
    target_year = models.CharField(max_length=16, blank=True, default='')
    faculty_name = models.CharField(max_length=255, blank=True, default='')
    created_by = models.CharField(max_length=255, blank=True, default='')
    script_url = models.URLField(max_length=1024, blank=True, default='')

    questions = models.JSONField(default=list, blank=True)
    total_marks = models.IntegerField(default=0)
    question_count = models.PositiveIntegerField(null=True, blank=True)
    question_pool = models.JSONField(default=list, blank=True)
    rules = models.JSONField(default=list, blank=True)
    topic_weights = models.JSONField(default=list, blank=True)
    target_students = models.ManyToManyField('academics.EnrollmentRecord', blank=True, related_name='personalized_assignments')

    start_time = models.DateTimeField(null=True, blank=True)
    deadline = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-created_at',)

    @property
    def is_special_type(self) -> bool:
        return self.type in (self.TYPE_PERSONALIZED, self.TYPE_BATCH_ATTENDANCE)

    def is_past_deadline(self, now=None) -> bool:
        if self.deadline is None:
            return False
        return self.deadline < (now or timezone.now())

    def has_started(self, now=None) -> bool:
        if self.start_time is None:
            return True
        return self.start_time <= (now or timezone.now())

    def clean(self):
        errors = defaultdict(list)

        for key in ('questions', 'question_pool'):
            for message in _id_list_errors(getattr(self, key), key):
                errors[key].append(message)

        if not isinstance(self.target_departments, list):
            errors['target_departments'].append('target_departments must be a list.')

        if not isinstance(self.rules, list):
            errors['rules'].append('rules must be a list of {min, max, count}.')
        else:
            for idx, rule in enumerate(self.rules):
                if not isinstance(rule, dict) or not all(_is_number(rule.get(k)) for k in ('min', 'max', 'count')):
                    errors['rules'].append(f'rule #{idx + 1} needs numeric min, max and count.')
                elif rule['min'] > rule['max']:
                    errors['rules'].append(f'rule #{idx + 1} has min greater than max.')
                elif rule['count'] < 0:
                    errors['rules'].append(f'rule #{idx + 1} has a negative count.')

        if not isinstance(self.topic_weights, list):
            errors['topic_weights'].append('topic_weights must be a list of {topic, weight}.')
        else:
            for idx, tw in enumerate(self.topic_weights):
                if not isinstance(tw, dict) or not tw.get('topic') or not _is_number(tw.get('weight')):
                    errors['topic_weights'].append(f'topic weight #{idx + 1} needs a topic and a numeric weight.')
                elif not 0 <= tw['weight'] <= 100:
                    errors['topic_weights'].append(f'topic weight #{idx + 1} must be between 0 and 100.')

        if self.type in (self.TYPE_RANDOMIZED, self.TYPE_PERSONALIZED) and self.question_count is None:
            errors['question_count'].append('question_count is required for this assignment type.')
        if self.type == self.TYPE_BATCH_ATTENDANCE and not self.rules:
            errors['rules'].append('batch_attendance assignments need at least one rule.')
        if self.start_time and self.deadline and self.start_time > self.deadline:
            errors['deadline'].append('deadline must be after start_time.')

        if errors:
            raise ValidationError(dict(errors))

    def __str__(self):
        return f"{self.title} [{self.type}]"


class StudentAssignment(models.Model):
    """The frozen question set allocated to one student for one assignment.

    Keyed by roll, not by enrollment row, so every enrollment of the same
    student converges on one allocation.
    """
    STATUS_PENDING = 'pending'
    STATUS_SUBMITTED = 'submitted'
    STATUS_GRADED = 'graded'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_SUBMITTED, 'Submitted'),
        (STATUS_GRADED, 'Graded'),
    )

    assignment = models.ForeignKey(Assignment, on_delete=models.CASCADE, related_name='student_assignments')
    student = models.ForeignKey('academics.EnrollmentRecord', on_delete=models.CASCADE, related_name='student_assignments')
    student_roll = models.CharField(max_length=64, db_index=True)
    question_ids = models.JSONField(default=list)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    submitted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['assignment', 'student_roll'], name='unique_allocation_per_student_roll'),
        ]

    def __str__(self):
        return f"{self.student_roll} -> {self.assignment_id} ({len(self.question_ids or [])} questions)"


class FacultyConfig(models.Model):
    """Per-faculty submission script endpoint, optionally scoped to a course."""
    faculty_name = models.CharField(max_length=255, db_index=True)
    course = models.CharField(max_length=64, blank=True, default='')
    script_url = models.URLField(max_length=1024, blank=True, default='')

    class Meta:
        verbose_name = 'Faculty Config'
        verbose_name_plural = 'Faculty Configs'
        ordering = ('faculty_name', 'course')

    def __str__(self):
        return f"{self.faculty_name} ({self.course or 'any course'})"
