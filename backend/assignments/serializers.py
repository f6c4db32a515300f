from rest_framework import serializers

from question_bank.models import Question

from .models import Assignment, StudentAssignment


class AssignmentInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Assignment
        fields = ('id', 'title', 'description', 'type', 'deadline', 'start_time', 'target_course', 'faculty_name')


class StudentQuestionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Question
        fields = ('id', 'code', 'text', 'latex', 'type', 'topic', 'subtopic')


class StudentAssignmentStatusSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentAssignment
        fields = ('status', 'submitted_at')


class StudentAssignmentListSerializer(AssignmentInfoSerializer):
    allocation = serializers.SerializerMethodField()

    class Meta(AssignmentInfoSerializer.Meta):
        fields = AssignmentInfoSerializer.Meta.fields + ('target_departments', 'target_year', 'allocation')

    def get_allocation(self, obj):
        allocations = self.context.get('allocations') or {}
        sa = allocations.get(obj.pk)
        if sa is None:
            return None
        return StudentAssignmentStatusSerializer(sa).data
