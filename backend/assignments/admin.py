from django.contrib import admin

from .models import Assignment, FacultyConfig, StudentAssignment


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ('title', 'type', 'target_course', 'faculty_name', 'start_time', 'deadline', 'created_at')
    list_filter = ('type', 'target_year')
    search_fields = ('title', 'target_course', 'faculty_name', 'created_by')
    filter_horizontal = ('target_students',)


@admin.register(StudentAssignment)
class StudentAssignmentAdmin(admin.ModelAdmin):
    list_display = ('student_roll', 'assignment', 'status', 'question_count', 'created_at')
    list_filter = ('status',)
    search_fields = ('student_roll', 'assignment__title')
    # Allocations are frozen once created.
    readonly_fields = ('assignment', 'student', 'student_roll', 'question_ids', 'created_at')

    def question_count(self, obj):
        return len(obj.question_ids or [])


@admin.register(FacultyConfig)
class FacultyConfigAdmin(admin.ModelAdmin):
    list_display = ('faculty_name', 'course', 'script_url')
    search_fields = ('faculty_name', 'course')
