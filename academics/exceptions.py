from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import APIException


class WorkloadError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Workload request could not be processed.'
    default_code = 'workload_error'


class CampusRequired(WorkloadError):
    default_detail = 'Campus is required'
    default_code = 'campus_required'


class AcademicYearRequired(WorkloadError):
    default_detail = 'Please select an academic year before assigning teachers.'
    default_code = 'academic_year_required'


class NotFoundInCampus(WorkloadError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class DuplicateAssignment(WorkloadError):
    default_detail = 'This teacher is already assigned to this subject and section for the academic year.'
    default_code = 'duplicate_assignment'


class PrimaryTeacherConflict(WorkloadError):
    default_code = 'primary_conflict'

    def __init__(self, message, existing=None):
        super().__init__(message)
        self.existing = existing


def error_message(exc_or_detail) -> str:
    """Flatten an exception or DRF error detail into one human readable line."""
    detail = exc_or_detail
    if isinstance(detail, APIException):
        detail = detail.detail
    elif isinstance(detail, DjangoValidationError):
        detail = detail.message_dict if hasattr(detail, 'error_dict') else detail.messages

    if isinstance(detail, dict):
        parts = []
        for key, value in detail.items():
            msg = error_message(value)
            parts.append(msg if key in ('detail', 'non_field_errors', '__all__') else f"{key}: {msg}")
        return '; '.join(p for p in parts if p)
    if isinstance(detail, (list, tuple)):
        return ' '.join(error_message(d) for d in detail)
    return str(detail)
