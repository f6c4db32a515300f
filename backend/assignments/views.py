from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from academics.serializers import StudentSimpleSerializer
from academics.models import EnrollmentRecord
from academics.services.identity import resolve_for_user
from question_bank.models import Question

from .models import StudentAssignment
from .serializers import AssignmentInfoSerializer, StudentAssignmentListSerializer, StudentAssignmentStatusSerializer, StudentQuestionSerializer
from .services.engine import evaluate_and_allocate
from .services.faculty import resolve_script_url
from .services.visibility import visible_assignments


def _ordered_questions(question_ids):
    by_id = Question.objects.in_bulk(question_ids)
    return [by_id[qid] for qid in question_ids if qid in by_id]


class StudentAssignmentListView(APIView):
    """Assignments visible to the current student, newest first."""
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        identity = resolve_for_user(request.user)
        assignments = visible_assignments(identity)
        allocations = {
            sa.assignment_id: sa
            for sa in StudentAssignment.objects.filter(student_roll=identity.roll, assignment__in=[a.pk for a in assignments])
        }
        ser = StudentAssignmentListSerializer(assignments, many=True, context={'allocations': allocations})
        return Response(ser.data)


class StudentAssignmentDetailView(APIView):
    """Assignment detail for the current student.

    Evaluates the attendance gate and, on first eligible access, allocates
    and stores the student's question set. Questions are returned only while
    the student may access them.
    """
    permission_classes = (IsAuthenticated,)

    def get(self, request, assignment_id):
        identity = resolve_for_user(request.user)
        result = evaluate_and_allocate(identity, assignment_id)
        assignment = result.assignment

        sa = result.student_assignment
        student = EnrollmentRecord.objects.filter(pk=identity.primary_id).first()

        return Response({
            'assignment': AssignmentInfoSerializer(assignment).data,
            'questions': StudentQuestionSerializer(_ordered_questions(result.question_ids), many=True).data,
            'attendance': {
                'percent': round(result.percent, 1),
                'total_classes': result.total,
                'attended_classes': result.attended,
                'faculty_name': assignment.faculty_name or 'Unknown',
            },
            'access': {
                'can_access': result.can_access,
                'required_attendance': result.required_percent,
                'is_past_deadline': result.is_past_deadline,
                'has_started': result.has_started,
            },
            'submission': StudentAssignmentStatusSerializer(sa).data if sa is not None else None,
            'script_url': resolve_script_url(assignment),
            'student': StudentSimpleSerializer(student).data if student is not None else None,
        })
