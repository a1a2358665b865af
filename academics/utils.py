import os
import string

from django.utils import timezone
from django.utils.crypto import get_random_string

_TOKEN_CHARS = string.ascii_lowercase + string.digits


def build_storage_path(tenant_id, campus_id, feature: str, entity_id, filename: str, now=None, token: str | None = None) -> str:
    """Object-storage key for an uploaded file.

    Layout: ``{tenant}/{campus}/{feature}/{entity}/{timestamp_ms}-{random}.{ext}``.
    The original filename only contributes its extension.
    """
    now = now or timezone.now()
    token = token or get_random_string(6, _TOKEN_CHARS)
    ext = os.path.splitext(filename or '')[1].lstrip('.').lower() or 'bin'
    stamp = int(now.timestamp() * 1000)
    return f"{tenant_id}/{campus_id}/{feature}/{entity_id}/{stamp}-{token}.{ext}"


def teacher_photo_path(instance, filename):
    campus = instance.campus
    return build_storage_path(campus.school_id, campus.pk, 'teachers', instance.pk or 'unsaved', filename)
