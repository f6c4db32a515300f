from django.apps import AppConfig


class QuestionBankConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'question_bank'
    verbose_name = 'Question Bank'
