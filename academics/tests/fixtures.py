from datetime import date

from django.contrib.auth import get_user_model

from academics.models import AcademicYear, GradeLevel, Section, Subject, Teacher
from accounts.models import Campus, School


def make_user(phone, campus=None, role='admin', first_name='', last_name='', password='pw12345'):
    User = get_user_model()
    return User.objects.create_user(
        phone=phone, password=password, campus=campus, role=role, first_name=first_name, last_name=last_name,
    )


def make_teacher(campus, employee_number, first_name, last_name, phone, is_active=True):
    user = make_user(phone, campus=campus, role='teacher', first_name=first_name, last_name=last_name)
    return Teacher.objects.create(campus=campus, user=user, employee_number=employee_number, is_active=is_active)


class WorkloadFixtureMixin:
    """One campus with two grades, a current year and two teachers."""

    def setUp(self):
        super().setUp()
        self.school = School.objects.create(name='Green Hill School', code='GHS')
        self.campus = Campus.objects.create(school=self.school, name='Main', code='MAIN')
        self.year = AcademicYear.objects.create(
            campus=self.campus, name='2025-2026', start_date=date(2025, 9, 1), end_date=date(2026, 6, 30), is_current=True,
        )
        self.old_year = AcademicYear.objects.create(
            campus=self.campus, name='2024-2025', start_date=date(2024, 9, 1), end_date=date(2025, 6, 30),
        )

        self.grade7 = GradeLevel.objects.create(campus=self.campus, name='Grade 7', order_index=7)
        self.grade8 = GradeLevel.objects.create(campus=self.campus, name='Grade 8', order_index=8)

        self.sec7a = Section.objects.create(campus=self.campus, grade_level=self.grade7, name='A')
        self.sec7b = Section.objects.create(campus=self.campus, grade_level=self.grade7, name='B')
        self.sec7c = Section.objects.create(campus=self.campus, grade_level=self.grade7, name='C', is_active=False)
        self.sec8a = Section.objects.create(campus=self.campus, grade_level=self.grade8, name='A')

        self.math7 = Subject.objects.create(campus=self.campus, grade_level=self.grade7, name='Mathematics', code='MATH7')
        self.sci7 = Subject.objects.create(campus=self.campus, grade_level=self.grade7, name='Science', code='SCI7', subject_type='lab')
        self.art7 = Subject.objects.create(campus=self.campus, grade_level=self.grade7, name='Art', code='ART7', is_active=False)
        self.math8 = Subject.objects.create(campus=self.campus, grade_level=self.grade8, name='Mathematics', code='MATH8')

        self.t1 = make_teacher(self.campus, 'EMP-001', 'Aziza', 'Karimova', '+998900000001')
        self.t2 = make_teacher(self.campus, 'EMP-002', 'Bobur', 'Aliev', '+998900000002')

        self.admin = make_user('+998900000100', campus=self.campus, role='admin', first_name='Admin')
