from django.urls import path

from .views import StudentAssignmentDetailView, StudentAssignmentListView

urlpatterns = [
    path('student/', StudentAssignmentListView.as_view()),
    path('student/<int:assignment_id>/', StudentAssignmentDetailView.as_view()),
]
