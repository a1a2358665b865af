# academics/views.py
import logging

from django.db import IntegrityError, transaction
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from . import services, workload
from .exceptions import NotFoundInCampus
from .models import AcademicYear, GradeLevel, Section, Subject, Teacher
from .permissions import IsCampusMemberOrRegistrarWrite
from .serializers import (
    AcademicYearSerializer,
    AssignmentCandidateSerializer,
    GradeLevelSerializer,
    SectionSerializer,
    SubjectSerializer,
    TeacherSerializer,
    TeacherSubjectAssignmentSerializer,
)

logger = logging.getLogger(__name__)


# =========================
# Helpers
# =========================

def _envelope(data, **extra):
    body = {"success": True, "data": data}
    body.update(extra)
    return body


def _int_param(request, *names):
    """First non-blank query param among ``names`` as an int, or None. Garbage is a 400."""
    for name in names:
        raw = request.query_params.get(name)
        if raw in (None, ""):
            continue
        try:
            return int(raw)
        except ValueError:
            raise ValidationError({name: "Must be an integer id."}) from None
    return None


def _academic_year_param(request, campus, name="academic_year"):
    """Optional ?academic_year=<id> (or academic_year_id) scoped to the campus."""
    raw = request.query_params.get(name) or request.query_params.get(f"{name}_id")
    if not raw:
        return None
    try:
        return AcademicYear.objects.get(pk=raw, campus=campus)
    except (AcademicYear.DoesNotExist, ValueError):
        raise NotFoundInCampus("Academic year not found") from None


# =========================
# Reference data CRUD (campus scoped)
# =========================

class CampusScopedViewSet(viewsets.ModelViewSet):
    permission_classes = [permissions.IsAuthenticated, IsCampusMemberOrRegistrarWrite]

    def get_queryset(self):
        return super().get_queryset().filter(campus_id=self.request.user.campus_id)

    def perform_create(self, serializer):
        self._save(serializer, campus=services.campus_for(self.request.user))

    def perform_update(self, serializer):
        self._save(serializer)

    def _save(self, serializer, **extra):
        try:
            with transaction.atomic():
                serializer.save(**extra)
        except IntegrityError:
            # a concurrent write got past the serializer's uniqueness checks
            logger.warning("Integrity error saving %s", serializer.Meta.model.__name__, exc_info=True)
            raise ValidationError({"detail": "A record with these values already exists."}) from None


class AcademicYearViewSet(CampusScopedViewSet):
    queryset = AcademicYear.objects.all()
    serializer_class = AcademicYearSerializer

    @action(detail=False, methods=["get"])
    def current(self, request):
        year = services.current_academic_year(request.user.campus)
        if year is None:
            return Response({"success": False, "error": "No current academic year"}, status=404)
        return Response(_envelope(self.get_serializer(year).data))

    @action(detail=True, methods=["post"], url_path="set-current")
    def set_current(self, request, pk=None):
        year = services.set_current_academic_year(self.get_object())
        return Response(_envelope(self.get_serializer(year).data))


class GradeLevelViewSet(CampusScopedViewSet):
    queryset = GradeLevel.objects.all().order_by("order_index")
    serializer_class = GradeLevelSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        if self.request.query_params.get("active") in ("1", "true"):
            qs = qs.filter(is_active=True)
        return qs


class SectionViewSet(CampusScopedViewSet):
    queryset = Section.objects.select_related("grade_level").all()
    serializer_class = SectionSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        grade = _int_param(self.request, "grade")
        if grade is not None:
            qs = qs.filter(grade_level_id=grade)
        return qs


class SubjectViewSet(CampusScopedViewSet):
    queryset = Subject.objects.all()
    serializer_class = SubjectSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        grade = _int_param(self.request, "grade")
        if grade is not None:
            qs = qs.filter(grade_level_id=grade)
        return qs


class TeacherViewSet(CampusScopedViewSet):
    queryset = Teacher.objects.select_related("user", "campus").all()
    serializer_class = TeacherSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        if self.request.query_params.get("active") in ("1", "true"):
            qs = qs.filter(is_active=True)
        return qs

    # ---- Directory (admin/registrar/operator) ----
    @action(detail=False, methods=["get"], url_path="directory")
    def directory(self, request):
        role = getattr(request.user, "role", "")
        if role not in ("admin", "registrar", "operator") and not request.user.is_superuser:
            return Response({"detail": "Forbidden"}, status=403)

        rows = []
        for t in self.get_queryset().filter(is_active=True):
            u = t.user
            rows.append(
                {
                    "id": t.id,
                    "user_id": u.id,
                    "employee_number": t.employee_number,
                    "first_name": (u.first_name or "").strip(),
                    "last_name": (u.last_name or "").strip(),
                    "phone": u.phone,
                }
            )
        return Response(rows)

    # ---- Photo upload: store, then hand back the public URL ----
    @action(
        detail=True,
        methods=["post"],
        url_path="photo",
        parser_classes=[MultiPartParser, FormParser],
    )
    def photo(self, request, pk=None):
        teacher = self.get_object()
        uploaded = request.FILES.get("file")
        if not uploaded:
            return Response({"success": False, "error": "file is required"}, status=400)

        if teacher.photo:
            teacher.photo.delete(save=False)
        teacher.photo.save(uploaded.name, uploaded, save=True)
        logger.info("Stored photo for teacher=%s at %s", teacher.id, teacher.photo.name)
        return Response(
            _envelope(
                {
                    "path": teacher.photo.name,
                    "photo_url": request.build_absolute_uri(teacher.photo.url),
                }
            )
        )


# =========================
# Workload allocation (teacher <-> subject <-> section)
# =========================

class TeacherAssignmentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Assignments are created and hard-deleted; there is no update path.
    Every mutation is followed by a full reload on the client.
    """
    serializer_class = TeacherSubjectAssignmentSerializer
    permission_classes = [permissions.IsAuthenticated, IsCampusMemberOrRegistrarWrite]
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    def get_queryset(self):
        campus = services.campus_for(self.request.user)
        qs = services.campus_assignments(campus)
        teacher_id = _int_param(self.request, "teacher_id", "teacher")
        year = _academic_year_param(self.request, campus)
        if teacher_id is not None:
            qs = qs.filter(teacher_id=teacher_id)
        if year is not None:
            qs = qs.filter(academic_year=year)
        return qs

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response(_envelope(serializer.data))

    def create(self, request, *args, **kwargs):
        campus = services.campus_for(request.user)
        candidate = AssignmentCandidateSerializer(data=request.data)
        candidate.is_valid(raise_exception=True)

        assignment, warning = services.create_assignment_from_payload(
            campus, candidate.validated_data, assigned_by=request.user
        )
        assignment = services.campus_assignments(campus).get(pk=assignment.pk)
        return Response(
            _envelope(
                self.get_serializer(assignment).data,
                message="Teacher assignment created successfully",
                warning=warning or None,
            ),
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request, *args, **kwargs):
        services.delete_assignment(services.campus_for(request.user), kwargs.get("pk"))
        return Response({"success": True, "message": "Teacher assignment removed successfully"})

    # ---- Conflict detector for the form (read-only, any campus member) ----
    @action(detail=False, methods=["post"], url_path="check", permission_classes=[permissions.IsAuthenticated])
    def check_conflict(self, request):
        campus = services.campus_for(request.user)
        candidate = AssignmentCandidateSerializer(data=request.data)
        candidate.is_valid(raise_exception=True)
        data = candidate.validated_data

        conflict, warning = None, ""
        if data.get("academic_year_id"):
            conflict, warning = services.check_primary_conflict(
                campus,
                data["teacher_id"],
                data["subject_id"],
                data["section_id"],
                data["academic_year_id"],
            )
        return Response(
            _envelope(
                {
                    "conflict": conflict is not None,
                    "warning": warning,
                    "blocking": conflict is not None and data["is_primary"],
                    "conflicting_assignment_id": getattr(conflict, "id", None),
                    "policy": services.primary_policy(),
                }
            )
        )


class WorkloadViewSet(viewsets.ViewSet):
    """Read-only helpers backing the workload page."""
    permission_classes = [permissions.IsAuthenticated, IsCampusMemberOrRegistrarWrite]

    @action(detail=False, methods=["get"])
    def reference(self, request):
        """
        GET /api/academics/workload/reference/?academic_year=<id> (optional)
        Grades (active, display order), sections, subjects, active teachers and
        assignments for the caller's campus.
        """
        campus = services.campus_for(request.user)
        year = _academic_year_param(request, campus)
        ref = services.load_reference_data(campus, year)
        ctx = {"request": request}
        return Response(
            _envelope(
                {
                    "grade_levels": GradeLevelSerializer(workload.active_grade_levels(ref.grade_levels), many=True).data,
                    "sections": SectionSerializer(ref.sections, many=True, context=ctx).data,
                    "subjects": SubjectSerializer(ref.subjects, many=True, context=ctx).data,
                    "teachers": TeacherSerializer(ref.teachers, many=True, context=ctx).data,
                    "assignments": TeacherSubjectAssignmentSerializer(ref.assignments, many=True).data,
                }
            )
        )

    @action(detail=False, methods=["get"], url_path="options")
    def cascade(self, request):
        """GET /api/academics/workload/options/?grade=<id>: sections and subjects valid for a grade."""
        campus = services.campus_for(request.user)
        grade = request.query_params.get("grade")
        opts = workload.cascade_options(
            grade,
            Section.objects.filter(campus=campus).select_related("grade_level"),
            Subject.objects.filter(campus=campus),
        )
        return Response(
            _envelope(
                {
                    "grade": grade or None,
                    "sections": SectionSerializer(opts.sections, many=True).data,
                    "subjects": SubjectSerializer(opts.subjects, many=True).data,
                }
            )
        )

    @action(detail=False, methods=["get"])
    def summary(self, request):
        """
        GET /api/academics/workload/summary/?search=&teacher=&academic_year=
        Filtered assignment table, per-teacher groups and headline counts.
        """
        campus = services.campus_for(request.user)
        year = _academic_year_param(request, campus)
        rows = list(services.campus_assignments(campus, year))
        rows = workload.filter_assignments(
            rows,
            search=request.query_params.get("search", ""),
            teacher_id=_int_param(request, "teacher"),
        )

        by_teacher = []
        for teacher_id, items in workload.group_by_teacher(rows).items():
            by_teacher.append(
                {
                    "teacher_id": teacher_id,
                    "teacher_name": workload.assignment_teacher_name(items[0]),
                    "assignment_ids": [a.id for a in items],
                    "count": len(items),
                    "primary_count": sum(1 for a in items if a.is_primary),
                }
            )

        return Response(
            _envelope(
                {
                    "assignments": TeacherSubjectAssignmentSerializer(rows, many=True).data,
                    "by_teacher": by_teacher,
                    "summary": workload.workload_summary(rows),
                }
            )
        )
