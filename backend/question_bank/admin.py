from django.contrib import admin

from .models import Question


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ('code', 'topic', 'subtopic', 'type', 'faculty_name', 'created_at')
    list_filter = ('type', 'topic')
    search_fields = ('code', 'text', 'topic', 'subtopic')
