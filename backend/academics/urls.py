from django.urls import path

from .views import StudentAttendanceView

urlpatterns = [
    path('student/attendance/', StudentAttendanceView.as_view()),
]
