from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AcademicYearViewSet,
    GradeLevelViewSet,
    SectionViewSet,
    SubjectViewSet,
    TeacherAssignmentViewSet,
    TeacherViewSet,
    WorkloadViewSet,
)

router = DefaultRouter()
router.register('academic-years', AcademicYearViewSet)
router.register('grade-levels', GradeLevelViewSet)
router.register('sections', SectionViewSet)
router.register('subjects', SubjectViewSet)
router.register('teachers', TeacherViewSet)
router.register('assignments', TeacherAssignmentViewSet, basename='teacher-assignment')
router.register('workload', WorkloadViewSet, basename='workload')

urlpatterns = [
    path('', include(router.urls)),
]
