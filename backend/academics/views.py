from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AttendanceSummarySerializer
from .services.attendance import compute_attendance_summary
from .services.identity import resolve_for_user


class StudentAttendanceView(APIView):
    """Course/faculty-wise attendance and mass-bunk sessions for the current student.

    Attendance of every enrollment row sharing the student's roll is merged.
    """
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        identity = resolve_for_user(request.user)
        summary = compute_attendance_summary(identity)
        return Response(AttendanceSummarySerializer(summary).data)
