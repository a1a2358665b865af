# academics/workload.py
"""
Rules behind the teacher workload page.

Every helper here accepts plain rows: dicts as they come out of the API
serializers, or model instances straight from the ORM. Campus and academic
year are always passed in by the caller.
"""
import logging
from collections import namedtuple
from collections.abc import Mapping

from .exceptions import WorkloadError, error_message

logger = logging.getLogger(__name__)

POLICY_ADVISORY = "advisory"
POLICY_STRICT = "strict"
POLICIES = (POLICY_ADVISORY, POLICY_STRICT)

UNKNOWN_TEACHER = "Unknown Teacher"

CascadedOptions = namedtuple("CascadedOptions", ["sections", "subjects"])


# =========================
# Row access
# =========================

def _field(row, name, default=None):
    if isinstance(row, Mapping):
        return row.get(name, default)
    return getattr(row, name, default)


def _blank(value) -> bool:
    return value is None or str(value).strip() == ""


def same_id(a, b) -> bool:
    """Ids arrive as ints from the ORM and as strings from query params."""
    if _blank(a) or _blank(b):
        return False
    return str(a) == str(b)


# =========================
# Cascading filter (grade -> section/subject)
# =========================

def active_grade_levels(grades):
    """Active grades in display order."""
    rows = [g for g in grades if _field(g, "is_active", True)]
    return sorted(rows, key=lambda g: _field(g, "order_index") or 0)


def filter_for_grade(rows, grade_id):
    """Active rows that belong to ``grade_id``.

    No grade selected means no valid children, not "everything".
    """
    if _blank(grade_id):
        return []
    return [
        r for r in rows
        if same_id(_field(r, "grade_level_id"), grade_id) and _field(r, "is_active", False)
    ]


def cascade_options(grade_id, sections, subjects) -> CascadedOptions:
    return CascadedOptions(
        sections=filter_for_grade(sections, grade_id),
        subjects=filter_for_grade(subjects, grade_id),
    )


# =========================
# Conflict detector
# =========================

def find_primary_conflict(candidate, academic_year_id, assignments):
    """
    First assignment in list order where another teacher already holds the
    primary role for the candidate's subject + section in ``academic_year_id``.
    Returns None while the candidate is incomplete.
    """
    teacher_id = _field(candidate, "teacher_id")
    subject_id = _field(candidate, "subject_id")
    section_id = _field(candidate, "section_id")
    if _blank(teacher_id) or _blank(subject_id) or _blank(section_id):
        return None

    for a in assignments:
        if (
            same_id(_field(a, "subject_id"), subject_id)
            and same_id(_field(a, "section_id"), section_id)
            and same_id(_field(a, "academic_year_id"), academic_year_id)
            and _field(a, "is_primary") is True
            and not same_id(_field(a, "teacher_id"), teacher_id)
        ):
            return a
    return None


def teacher_display_name(teacher) -> str:
    profile = _field(teacher, "profile")
    if profile is not None:
        first, last = _field(profile, "first_name") or "", _field(profile, "last_name") or ""
    else:
        user = _field(teacher, "user")
        first = (_field(user, "first_name") if user is not None else None) or _field(teacher, "first_name") or ""
        last = (_field(user, "last_name") if user is not None else None) or _field(teacher, "last_name") or ""
    return f"{first} {last}".strip()


def assignment_teacher_name(assignment, teachers=()) -> str:
    name = _field(assignment, "teacher_name")
    if name:
        return name
    teacher_id = _field(assignment, "teacher_id")
    for t in teachers:
        if same_id(_field(t, "id"), teacher_id):
            return teacher_display_name(t) or UNKNOWN_TEACHER
    return UNKNOWN_TEACHER


def conflict_message(conflict, teachers=()) -> str:
    name = assignment_teacher_name(conflict, teachers)
    return f"{name} is already the primary teacher for this subject-section combination."


def primary_conflict_warning(candidate, academic_year_id, assignments, teachers=()) -> str:
    """Warning text for the form, or an empty string when there is no conflict."""
    conflict = find_primary_conflict(candidate, academic_year_id, assignments)
    if conflict is None:
        return ""
    return conflict_message(conflict, teachers)


# =========================
# Assignment table
# =========================

def matches_search(assignment, query: str) -> bool:
    q = (query or "").strip().lower()
    if not q:
        return True
    for key in ("teacher_name", "subject_name", "section_name"):
        value = _field(assignment, key)
        if value and q in str(value).lower():
            return True
    return False


def filter_assignments(assignments, search="", teacher_id=None, academic_year_id=None):
    rows = []
    for a in assignments:
        if not _blank(teacher_id) and not same_id(_field(a, "teacher_id"), teacher_id):
            continue
        if not _blank(academic_year_id) and not same_id(_field(a, "academic_year_id"), academic_year_id):
            continue
        if matches_search(a, search):
            rows.append(a)
    return rows


def group_by_teacher(assignments) -> dict:
    """teacher_id -> assignments, in first-seen order."""
    groups = {}
    for a in assignments:
        groups.setdefault(_field(a, "teacher_id"), []).append(a)
    return groups


def workload_summary(assignments) -> dict:
    return {
        "total_assignments": len(assignments),
        "active_teachers": len(group_by_teacher(assignments)),
        "primary_assignments": sum(1 for a in assignments if _field(a, "is_primary") is True),
    }


# =========================
# Assignment form
# =========================

class AssignmentForm:
    """
    State machine for creating one assignment.

        grade_unselected -> section_and_subject_enabled -> valid_candidate
            -> submitting -> success | error

    Section and subject can only be picked after a grade. ``submit`` never
    calls ``create`` while the candidate is incomplete, the academic year is
    missing, or a primary conflict blocks it.
    """

    GRADE_UNSELECTED = "grade_unselected"
    SECTION_AND_SUBJECT_ENABLED = "section_and_subject_enabled"
    VALID_CANDIDATE = "valid_candidate"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"

    def __init__(self, reference, academic_year_id=None):
        self.academic_year_id = academic_year_id
        self.outcome = None
        self.last_created = None
        self.load(reference)
        self.reset()

    # ---- reference data ----
    def load(self, reference):
        self.grade_levels = list(reference.grade_levels)
        self.sections = list(reference.sections)
        self.subjects = list(reference.subjects)
        self.teachers = list(reference.teachers)
        self.assignments = list(reference.assignments)

    def reset(self):
        self.grade_id = None
        self.teacher_id = None
        self.section_id = None
        self.subject_id = None
        self.is_primary = True
        self.error = ""
        self.state = self.GRADE_UNSELECTED

    # ---- derived ----
    @property
    def options(self) -> CascadedOptions:
        return cascade_options(self.grade_id, self.sections, self.subjects)

    @property
    def candidate(self) -> dict:
        return {
            "teacher_id": self.teacher_id,
            "subject_id": self.subject_id,
            "section_id": self.section_id,
        }

    @property
    def conflict_warning(self) -> str:
        return primary_conflict_warning(self.candidate, self.academic_year_id, self.assignments, self.teachers)

    @property
    def missing_fields(self) -> list:
        return [name for name, value in (
            ("teacher_id", self.teacher_id),
            ("section_id", self.section_id),
            ("subject_id", self.subject_id),
        ) if _blank(value)]

    @property
    def blocked_by_conflict(self) -> bool:
        return bool(self.conflict_warning) and self.is_primary

    @property
    def can_submit(self) -> bool:
        return (
            self.state == self.VALID_CANDIDATE
            and not _blank(self.academic_year_id)
            and not self.blocked_by_conflict
        )

    def _refresh_state(self):
        if _blank(self.grade_id):
            self.state = self.GRADE_UNSELECTED
        elif self.missing_fields:
            self.state = self.SECTION_AND_SUBJECT_ENABLED
        else:
            self.state = self.VALID_CANDIDATE

    # ---- transitions ----
    def select_teacher(self, teacher_id):
        self.teacher_id = teacher_id
        self._refresh_state()

    def select_grade(self, grade_id):
        # a new grade invalidates whatever section/subject was picked before
        self.grade_id = grade_id
        self.section_id = None
        self.subject_id = None
        self._refresh_state()

    def select_section(self, section_id):
        self.section_id = self._pick(section_id, self.sections, self.options.sections, "Section")
        self._refresh_state()

    def select_subject(self, subject_id):
        self.subject_id = self._pick(subject_id, self.subjects, self.options.subjects, "Subject")
        self._refresh_state()

    def set_primary(self, is_primary: bool):
        self.is_primary = bool(is_primary)

    def _pick(self, value, rows, allowed, label):
        if _blank(self.grade_id):
            raise WorkloadError("Select a grade level first.")
        if _blank(value):
            return None
        if any(same_id(_field(r, "id"), value) for r in allowed):
            return value
        in_grade = any(
            same_id(_field(r, "id"), value) and same_id(_field(r, "grade_level_id"), self.grade_id)
            for r in rows
        )
        if in_grade:
            raise WorkloadError(f"{label} is not available for the selected grade.")
        raise WorkloadError(f"{label} does not belong to the selected grade.")

    def payload(self) -> dict:
        return {
            "teacher_id": self.teacher_id,
            "subject_id": self.subject_id,
            "section_id": self.section_id,
            "is_primary": self.is_primary,
            "academic_year_id": self.academic_year_id,
        }

    def submit(self, create, reload=None):
        """
        Send the candidate through ``create(payload)``.

        On success the form resets and ``reload()`` (if given) supplies fresh
        reference data. On failure the selection is kept and ``error`` holds the
        server message. A failing ``reload`` leaves the old data loaded and sets
        ``error``. Returns whatever ``create`` returned, or None.
        """
        if self.state == self.SUBMITTING:
            return None
        if self.missing_fields:
            self.error = "Teacher, section and subject are required."
            return None
        if _blank(self.academic_year_id):
            self.error = "Please select an academic year before assigning teachers."
            return None
        if self.blocked_by_conflict:
            self.error = self.conflict_warning
            return None

        self.state = self.SUBMITTING
        self.error = ""
        try:
            created = create(self.payload())
        except WorkloadError as exc:
            self._fail(exc)
            return None
        except Exception as exc:
            logger.exception("Assignment create call failed")
            self._fail(exc)
            return None

        self.outcome = self.SUCCESS
        self.last_created = created
        self.reset()
        if reload is not None:
            try:
                self.load(reload())
            except Exception as exc:
                # the row exists; only the local copy is stale
                logger.exception("Reloading workload data failed after create")
                self.error = f"Assignment created, but reloading failed: {error_message(exc)}"
        return created

    def _fail(self, exc):
        self.outcome = self.ERROR
        self.error = error_message(exc) or "Failed to create assignment"
        # keep the selection so the operator can retry
        self._refresh_state()
