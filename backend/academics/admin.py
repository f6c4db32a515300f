from django import forms
from django.contrib import admin
from django.core.exceptions import ValidationError

from .models import AttendancePolicy, AttendanceRecord, EnrollmentRecord


@admin.register(EnrollmentRecord)
class EnrollmentRecordAdmin(admin.ModelAdmin):
    list_display = ('roll', 'name', 'department', 'year', 'course_code', 'attended_adjustment', 'total_classes_adjustment', 'login_disabled')
    list_filter = ('department', 'year', 'login_disabled')
    search_fields = ('roll', 'name', 'course_code')
    raw_id_fields = ('user',)


class AttendanceRecordForm(forms.ModelForm):
    class Meta:
        model = AttendanceRecord
        fields = '__all__'

    def clean(self):
        cleaned = super().clean()
        present = cleaned.get('present_students') or []
        absent = cleaned.get('absent_students') or []
        overlap = {s.pk for s in present} & {s.pk for s in absent}
        if overlap:
            raise ValidationError('A student cannot be both present and absent in the same session.')
        return cleaned


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    form = AttendanceRecordForm
    list_display = ('date', 'time_slot', 'course_code', 'teacher_name', 'present_count', 'absent_count')
    list_filter = ('date', 'course_code')
    search_fields = ('course_code', 'teacher_name')
    filter_horizontal = ('present_students', 'absent_students')
    date_hierarchy = 'date'

    def present_count(self, obj):
        return obj.present_students.count()

    def absent_count(self, obj):
        return obj.absent_students.count()


@admin.register(AttendancePolicy)
class AttendancePolicyAdmin(admin.ModelAdmin):
    list_display = ('id', 'default_requirement', 'updated_at')
    readonly_fields = ('updated_at',)
