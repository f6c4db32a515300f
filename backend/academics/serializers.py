from rest_framework import serializers

from .models import EnrollmentRecord


class StudentSimpleSerializer(serializers.ModelSerializer):
    class Meta:
        model = EnrollmentRecord
        fields = ('id', 'roll', 'name', 'department', 'year', 'course_code')


class CourseAttendanceSerializer(serializers.Serializer):
    course = serializers.CharField()
    faculty = serializers.CharField()
    attended = serializers.IntegerField()
    total = serializers.IntegerField()
    percent = serializers.SerializerMethodField()

    def get_percent(self, obj):
        return round(obj.percent, 1)


class MassBunkEventSerializer(serializers.Serializer):
    date = serializers.DateField()
    time_slot = serializers.CharField()
    course_code = serializers.CharField()
    teacher_name = serializers.CharField()


class AdjustmentsSerializer(serializers.Serializer):
    attended = serializers.IntegerField()
    total = serializers.IntegerField()
    submission = serializers.IntegerField()


class CourseTotalSerializer(serializers.Serializer):
    course = serializers.CharField()
    attended = serializers.IntegerField()
    total = serializers.IntegerField()
    percent = serializers.SerializerMethodField()
    adjustments = AdjustmentsSerializer()

    def get_percent(self, obj):
        return round(obj.percent, 1)


class OverallAttendanceSerializer(serializers.Serializer):
    attended = serializers.IntegerField()
    total = serializers.IntegerField()
    percent = serializers.SerializerMethodField()

    def get_percent(self, obj):
        return round(obj.percent, 1)


class AttendanceSummarySerializer(serializers.Serializer):
    roll = serializers.CharField()
    per_course = CourseAttendanceSerializer(many=True)
    course_totals = CourseTotalSerializer(many=True)
    overall = OverallAttendanceSerializer()
    mass_bunk_count = serializers.IntegerField()
    mass_bunk_events = MassBunkEventSerializer(many=True)
