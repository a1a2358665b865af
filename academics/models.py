from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounts.models import Campus

from .utils import teacher_photo_path

User = settings.AUTH_USER_MODEL


class AcademicYear(models.Model):
    campus = models.ForeignKey(Campus, on_delete=models.CASCADE, related_name='academic_years')
    name = models.CharField(max_length=100)  # e.g. "2025-2026"
    start_date = models.DateField()
    end_date = models.DateField()
    is_current = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-start_date']
        constraints = [
            models.UniqueConstraint(fields=['campus', 'name'], name='unique_year_per_campus'),
            models.UniqueConstraint(fields=['campus'], condition=Q(is_current=True), name='one_current_year_per_campus'),
        ]

    def clean(self):
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError({'end_date': 'End date must be after start date.'})

    def __str__(self):
        return self.name


class GradeLevel(models.Model):
    campus = models.ForeignKey(Campus, on_delete=models.CASCADE, related_name='grade_levels')
    name = models.CharField(max_length=100)
    order_index = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['order_index']
        constraints = [
            models.UniqueConstraint(fields=['campus', 'name'], name='unique_grade_per_campus'),
            models.UniqueConstraint(fields=['campus', 'order_index'], name='unique_grade_order_per_campus'),
        ]

    def __str__(self):
        return self.name


class Section(models.Model):
    campus = models.ForeignKey(Campus, on_delete=models.CASCADE, related_name='sections')
    grade_level = models.ForeignKey(GradeLevel, on_delete=models.CASCADE, related_name='sections')
    name = models.CharField(max_length=100)  # e.g. "A"
    capacity = models.PositiveIntegerField(default=30)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['grade_level__order_index', 'name']
        constraints = [
            models.UniqueConstraint(fields=['grade_level', 'name'], name='unique_section_per_grade'),
        ]

    def clean(self):
        if self.capacity is not None and self.capacity < 1:
            raise ValidationError({'capacity': 'Capacity must be positive.'})

    def __str__(self):
        return f"{self.grade_level.name} - {self.name}"


class Subject(models.Model):
    TYPES = (
        ('theory', 'Theory'),
        ('lab', 'Lab'),
        ('practical', 'Practical'),
    )
    campus = models.ForeignKey(Campus, on_delete=models.CASCADE, related_name='subjects')
    grade_level = models.ForeignKey(GradeLevel, on_delete=models.CASCADE, related_name='subjects')
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=50)
    subject_type = models.CharField(max_length=20, choices=TYPES, default='theory')
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['campus', 'code'], name='unique_subject_code_per_campus'),
            models.UniqueConstraint(fields=['grade_level', 'name'], name='unique_subject_per_grade'),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"


class Teacher(models.Model):
    EMPLOYMENT_TYPES = (
        ('full_time', 'Full time'),
        ('part_time', 'Part time'),
        ('contract', 'Contract'),
    )
    campus = models.ForeignKey(Campus, on_delete=models.CASCADE, related_name='teachers')
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='teacher_profile')
    employee_number = models.CharField(max_length=50, unique=True)
    title = models.CharField(max_length=100, blank=True)
    department = models.CharField(max_length=100, blank=True)
    specialization = models.CharField(max_length=200, blank=True)
    date_of_joining = models.DateField(null=True, blank=True)
    employment_type = models.CharField(max_length=20, choices=EMPLOYMENT_TYPES, default='full_time')
    is_active = models.BooleanField(default=True)
    photo = models.FileField(upload_to=teacher_photo_path, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['user__last_name', 'user__first_name']

    @property
    def display_name(self):
        u = self.user
        return f"{u.first_name} {u.last_name}".strip() or self.employee_number

    def __str__(self):
        return f"{self.display_name} ({self.employee_number})"


class TeacherSubjectAssignment(models.Model):
    """Workload row: a teacher teaches a subject to a section in an academic year.

    The (teacher, subject, section, academic_year) tuple is unique. How many
    primary teachers a subject-section may have is decided by the service
    layer, see ``academics.services.create_assignment``.
    """
    campus = models.ForeignKey(Campus, on_delete=models.CASCADE, related_name='teacher_assignments')
    teacher = models.ForeignKey(Teacher, on_delete=models.CASCADE, related_name='subject_assignments')
    subject = models.ForeignKey(Subject, on_delete=models.CASCADE, related_name='teacher_assignments')
    section = models.ForeignKey(Section, on_delete=models.CASCADE, related_name='teacher_assignments')
    academic_year = models.ForeignKey(AcademicYear, on_delete=models.CASCADE, related_name='teacher_assignments')
    is_primary = models.BooleanField(default=True)
    assigned_at = models.DateTimeField(auto_now_add=True)
    assigned_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')

    class Meta:
        ordering = ['-assigned_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['teacher', 'subject', 'section', 'academic_year'],
                name='unique_teacher_subject_section_year',
            ),
        ]
        indexes = [
            models.Index(fields=['subject', 'section', 'academic_year'], name='assignment_subj_sect_year_idx'),
        ]

    @property
    def teacher_name(self):
        return self.teacher.display_name

    @property
    def subject_name(self):
        return self.subject.name

    @property
    def section_name(self):
        return self.section.name

    @property
    def grade_name(self):
        return self.section.grade_level.name

    def __str__(self):
        kind = 'primary' if self.is_primary else 'secondary'
        return f"{self.teacher_name} -> {self.subject_name} ({self.section} | {self.academic_year}, {kind})"
