from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from academics import services
from academics.models import TeacherSubjectAssignment

from .fixtures import WorkloadFixtureMixin


class AssignTeacherCommandTests(WorkloadFixtureMixin, TestCase):
    def _call(self, *extra, teacher='EMP-001', section='A', subject='MATH7'):
        out = StringIO()
        call_command(
            'assign_teacher',
            '--campus', str(self.campus.id),
            '--teacher', teacher,
            '--grade', 'Grade 7',
            '--section', section,
            '--subject', subject,
            *extra,
            stdout=out,
        )
        return out.getvalue()

    def test_assigns_into_current_year(self):
        output = self._call()
        assignment = TeacherSubjectAssignment.objects.get()
        self.assertEqual(assignment.academic_year, self.year)
        self.assertTrue(assignment.is_primary)
        self.assertIn(f'Created assignment #{assignment.id}', output)

    def test_explicit_year(self):
        self._call('--year', str(self.old_year.id))
        self.assertEqual(TeacherSubjectAssignment.objects.get().academic_year, self.old_year)

    def test_primary_conflict_is_blocked(self):
        services.create_assignment(self.campus, self.t1, self.math7, self.sec7a, self.year)
        with self.assertRaisesMessage(CommandError, 'Aziza Karimova is already the primary teacher'):
            self._call(teacher='EMP-002')
        self.assertEqual(TeacherSubjectAssignment.objects.count(), 1)

    def test_secondary_goes_through_with_warning(self):
        services.create_assignment(self.campus, self.t1, self.math7, self.sec7a, self.year)
        output = self._call('--secondary', teacher='EMP-002')
        self.assertIn('already the primary teacher', output)
        self.assertFalse(TeacherSubjectAssignment.objects.get(teacher=self.t2).is_primary)

    def test_subject_of_other_grade_is_refused(self):
        with self.assertRaisesMessage(CommandError, 'does not belong to the selected grade'):
            self._call(subject='MATH8')

    def test_unknown_teacher(self):
        with self.assertRaisesMessage(CommandError, 'Teacher not found'):
            self._call(teacher='EMP-404')
