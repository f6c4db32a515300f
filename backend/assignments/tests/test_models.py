from django.core.exceptions import ValidationError
from django.test import TestCase

from assignments.models import Assignment


class AssignmentValidationTests(TestCase):
    def assertInvalid(self, field, **kwargs):
        with self.assertRaises(ValidationError) as ctx:
            Assignment(title='Quiz', **kwargs).full_clean()
        self.assertIn(field, ctx.exception.message_dict)

    def test_rule_shape(self):
        self.assertInvalid('rules', type='batch_attendance', rules=[{'min': 80, 'max': 60, 'count': 2}])
        self.assertInvalid('rules', type='batch_attendance', rules=[{'min': 0, 'max': 60}])
        self.assertInvalid('rules', type='batch_attendance', rules=[])

    def test_topic_weights(self):
        self.assertInvalid('topic_weights', type='manual', topic_weights=[{'topic': 'A', 'weight': 140}])
        self.assertInvalid('topic_weights', type='manual', topic_weights=[{'weight': 40}])

    def test_question_count_required_for_random_draws(self):
        self.assertInvalid('question_count', type='randomized', question_pool=[1, 2])
        self.assertInvalid('question_count', type='personalized')

    def test_question_lists_hold_ids(self):
        self.assertInvalid('question_pool', type='randomized', question_count=1, question_pool=['Q1'])

    def test_valid_batch_assignment(self):
        Assignment(
            title='Batch', type='batch_attendance',
            rules=[{'min': 70, 'max': 100, 'count': 5}, {'min': 0, 'max': 69, 'count': 3}],
            topic_weights=[{'topic': 'A', 'weight': 60}, {'topic': 'B', 'weight': 40}],
        ).full_clean()
