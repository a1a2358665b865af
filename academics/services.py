import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import IntegrityError, transaction

from . import workload
from .exceptions import (
    AcademicYearRequired,
    CampusRequired,
    DuplicateAssignment,
    NotFoundInCampus,
    PrimaryTeacherConflict,
    WorkloadError,
)
from .models import AcademicYear, GradeLevel, Section, Subject, Teacher, TeacherSubjectAssignment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceData:
    grade_levels: list
    sections: list
    subjects: list
    teachers: list
    assignments: list


def primary_policy() -> str:
    policy = getattr(settings, 'WORKLOAD_PRIMARY_POLICY', workload.POLICY_ADVISORY)
    if policy not in workload.POLICIES:
        raise ValueError(f"WORKLOAD_PRIMARY_POLICY must be one of {workload.POLICIES}, got {policy!r}")
    return policy


def campus_for(user):
    campus = getattr(user, 'campus', None)
    if campus is None:
        raise CampusRequired()
    return campus


def current_academic_year(campus):
    return AcademicYear.objects.filter(campus=campus, is_current=True).first()


def campus_assignments(campus, academic_year=None, teacher=None):
    qs = TeacherSubjectAssignment.objects.filter(campus=campus).select_related(
        'teacher', 'teacher__user', 'subject', 'section', 'section__grade_level', 'academic_year',
    )
    if academic_year is not None:
        qs = qs.filter(academic_year=academic_year)
    if teacher is not None:
        qs = qs.filter(teacher=teacher)
    return qs


def load_reference_data(campus, academic_year=None) -> ReferenceData:
    """Everything the workload page needs, fetched in one go for one campus."""
    return ReferenceData(
        grade_levels=list(GradeLevel.objects.filter(campus=campus).order_by('order_index')),
        sections=list(Section.objects.filter(campus=campus).select_related('grade_level')),
        subjects=list(Subject.objects.filter(campus=campus)),
        teachers=list(Teacher.objects.filter(campus=campus, is_active=True).select_related('user')),
        assignments=list(campus_assignments(campus, academic_year)),
    )


def _get_in_campus(model, pk, campus, label):
    if pk in (None, ''):
        raise WorkloadError(f"{label} is required")
    try:
        return model.objects.get(pk=pk, campus=campus)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFoundInCampus(f"{label} not found") from None


def resolve_candidate(campus, payload) -> dict:
    """Turn the id-based create payload into model instances of ``campus``."""
    if payload.get('academic_year_id') in (None, ''):
        raise AcademicYearRequired()
    return {
        'teacher': _get_in_campus(Teacher, payload.get('teacher_id'), campus, 'Teacher'),
        'subject': _get_in_campus(Subject, payload.get('subject_id'), campus, 'Subject'),
        'section': _get_in_campus(Section, payload.get('section_id'), campus, 'Section'),
        'academic_year': _get_in_campus(AcademicYear, payload.get('academic_year_id'), campus, 'Academic year'),
        'is_primary': payload.get('is_primary', True) is not False,
    }


def check_primary_conflict(campus, teacher_id, subject_id, section_id, academic_year_id):
    """Server-side run of the conflict detector. Returns (conflict, warning)."""
    rows = campus_assignments(campus).filter(
        subject_id=subject_id, section_id=section_id, academic_year_id=academic_year_id, is_primary=True,
    )
    candidate = {'teacher_id': teacher_id, 'subject_id': subject_id, 'section_id': section_id}
    conflict = workload.find_primary_conflict(candidate, academic_year_id, rows)
    if conflict is None:
        return None, ''
    return conflict, workload.conflict_message(conflict)


def create_assignment(campus, teacher, subject, section, academic_year, is_primary=True, assigned_by=None, policy=None):
    """
    Create one workload row. Returns ``(assignment, warning)``.

    Under the ``strict`` policy a second primary teacher for the same
    subject + section + year is rejected; under ``advisory`` it is created and
    the warning is handed back to the caller.
    """
    policy = policy or primary_policy()

    for obj, label in ((teacher, 'Teacher'), (subject, 'Subject'), (section, 'Section'), (academic_year, 'Academic year')):
        if obj.campus_id != campus.id:
            raise NotFoundInCampus(f"{label} not found")
    if not teacher.is_active:
        raise WorkloadError('Teacher is not active')
    if not section.is_active:
        raise WorkloadError('Section is not active')
    if not subject.is_active:
        raise WorkloadError('Subject is not active')
    if section.grade_level_id != subject.grade_level_id:
        raise WorkloadError('Section and subject belong to different grade levels')

    with transaction.atomic():
        # serialise concurrent creates for the same section
        Section.objects.select_for_update().filter(pk=section.pk).order_by('pk').first()

        exists = TeacherSubjectAssignment.objects.filter(
            teacher=teacher, subject=subject, section=section, academic_year=academic_year,
        ).exists()
        if exists:
            raise DuplicateAssignment()

        warning = ''
        if is_primary:
            conflict, warning = check_primary_conflict(campus, teacher.id, subject.id, section.id, academic_year.id)
            if conflict is not None:
                logger.warning(
                    'Primary conflict for subject=%s section=%s year=%s: held by teacher=%s (policy=%s)',
                    subject.id, section.id, academic_year.id, conflict.teacher_id, policy,
                )
                if policy == workload.POLICY_STRICT:
                    raise PrimaryTeacherConflict(warning, existing=conflict)

        try:
            with transaction.atomic():
                assignment = TeacherSubjectAssignment.objects.create(
                    campus=campus,
                    teacher=teacher,
                    subject=subject,
                    section=section,
                    academic_year=academic_year,
                    is_primary=is_primary,
                    assigned_by=assigned_by,
                )
        except IntegrityError:
            raise DuplicateAssignment() from None

    logger.info(
        'Assigned teacher=%s subject=%s section=%s year=%s primary=%s',
        teacher.id, subject.id, section.id, academic_year.id, is_primary,
    )
    return assignment, warning


def create_assignment_from_payload(campus, payload, assigned_by=None, policy=None):
    resolved = resolve_candidate(campus, payload)
    return create_assignment(campus, assigned_by=assigned_by, policy=policy, **resolved)


def delete_assignment(campus, assignment_id):
    assignment = _get_in_campus(TeacherSubjectAssignment, assignment_id, campus, 'Assignment')
    assignment.delete()
    logger.info('Removed teacher assignment id=%s', assignment_id)


def set_current_academic_year(year):
    with transaction.atomic():
        AcademicYear.objects.filter(campus_id=year.campus_id, is_current=True).exclude(pk=year.pk).update(is_current=False)
        if not year.is_current:
            year.is_current = True
            year.save(update_fields=['is_current'])
    logger.info('Academic year %s is now current for campus=%s', year.pk, year.campus_id)
    return year
