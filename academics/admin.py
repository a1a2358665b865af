from django.contrib import admin

from accounts.admin import CampusScopedAdmin

from .models import AcademicYear, GradeLevel, Section, Subject, Teacher, TeacherSubjectAssignment


@admin.register(AcademicYear)
class AcademicYearAdmin(CampusScopedAdmin):
    list_display = ('id', 'name', 'campus', 'start_date', 'end_date', 'is_current', 'is_active')
    list_filter = ('campus', 'is_current', 'is_active')
    search_fields = ('name',)


@admin.register(GradeLevel)
class GradeLevelAdmin(CampusScopedAdmin):
    list_display = ('id', 'name', 'campus', 'order_index', 'is_active')
    list_filter = ('campus', 'is_active')
    ordering = ('campus', 'order_index')


@admin.register(Section)
class SectionAdmin(CampusScopedAdmin):
    list_display = ('id', 'name', 'grade_level', 'capacity', 'is_active')
    search_fields = ('name',)
    list_filter = ('campus', 'grade_level', 'is_active')


@admin.register(Subject)
class SubjectAdmin(CampusScopedAdmin):
    list_display = ('id', 'name', 'code', 'grade_level', 'subject_type', 'is_active')
    search_fields = ('name', 'code')
    list_filter = ('campus', 'subject_type', 'is_active')


@admin.register(Teacher)
class TeacherAdmin(CampusScopedAdmin):
    list_display = ('id', 'employee_number', 'user', 'campus', 'employment_type', 'is_active')
    search_fields = ('employee_number', 'user__phone', 'user__first_name', 'user__last_name')
    list_filter = ('campus', 'employment_type', 'is_active')


@admin.register(TeacherSubjectAssignment)
class TeacherSubjectAssignmentAdmin(CampusScopedAdmin):
    list_display = ('id', 'teacher', 'subject', 'section', 'academic_year', 'is_primary', 'assigned_at')
    list_filter = ('campus', 'academic_year', 'is_primary')
    search_fields = ('teacher__employee_number', 'teacher__user__last_name', 'subject__name', 'section__name')
    raw_id_fields = ('teacher', 'subject', 'section')
