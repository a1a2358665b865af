from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from academics import services
from academics.models import TeacherSubjectAssignment

from .fixtures import WorkloadFixtureMixin, make_user

URL = '/api/academics/assignments/'


class AssignmentApiTests(WorkloadFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.client.force_authenticate(self.admin)

    def _payload(self, teacher, **overrides):
        data = {
            'teacher_id': teacher.id,
            'subject_id': self.math7.id,
            'section_id': self.sec7a.id,
            'academic_year_id': self.year.id,
            'is_primary': True,
        }
        data.update(overrides)
        return data

    def test_list_returns_envelope_and_filters(self):
        services.create_assignment(self.campus, self.t1, self.math7, self.sec7a, self.year)
        services.create_assignment(self.campus, self.t2, self.sci7, self.sec7b, self.year)
        services.create_assignment(self.campus, self.t2, self.sci7, self.sec7b, self.old_year)

        res = self.client.get(URL)
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data['success'])
        self.assertEqual(len(res.data['data']), 3)

        res = self.client.get(URL, {'teacher_id': self.t2.id, 'academic_year': self.year.id})
        self.assertEqual(len(res.data['data']), 1)
        row = res.data['data'][0]
        self.assertEqual(row['teacher_name'], 'Bobur Aliev')
        self.assertEqual(row['subject_name'], 'Science')
        self.assertEqual(row['section_name'], 'B')
        self.assertEqual(row['grade_name'], 'Grade 7')

    def test_create_returns_201(self):
        res = self.client.post(URL, self._payload(self.t1), format='json')
        self.assertEqual(res.status_code, 201)
        self.assertTrue(res.data['success'])
        self.assertEqual(res.data['message'], 'Teacher assignment created successfully')
        self.assertIsNone(res.data['warning'])
        created = TeacherSubjectAssignment.objects.get()
        self.assertEqual(created.assigned_by, self.admin)
        self.assertEqual(res.data['data']['id'], created.id)

    def test_second_primary_is_created_with_warning_by_default(self):
        self.client.post(URL, self._payload(self.t1), format='json')
        res = self.client.post(URL, self._payload(self.t2), format='json')
        self.assertEqual(res.status_code, 201)
        self.assertEqual(
            res.data['warning'], 'Aziza Karimova is already the primary teacher for this subject-section combination.'
        )

    @override_settings(WORKLOAD_PRIMARY_POLICY='strict')
    def test_second_primary_is_rejected_under_strict_policy(self):
        self.client.post(URL, self._payload(self.t1), format='json')
        res = self.client.post(URL, self._payload(self.t2), format='json')
        self.assertEqual(res.status_code, 400)
        self.assertFalse(res.data['success'])
        self.assertEqual(
            res.data['error'], 'Aziza Karimova is already the primary teacher for this subject-section combination.'
        )
        self.assertEqual(TeacherSubjectAssignment.objects.count(), 1)

    def test_missing_field_creates_nothing(self):
        payload = self._payload(self.t1)
        del payload['subject_id']
        res = self.client.post(URL, payload, format='json')
        self.assertEqual(res.status_code, 400)
        self.assertFalse(res.data['success'])
        self.assertIn('subject_id', res.data['errors'])
        self.assertFalse(TeacherSubjectAssignment.objects.exists())

    def test_missing_academic_year_creates_nothing(self):
        payload = self._payload(self.t1)
        del payload['academic_year_id']
        res = self.client.post(URL, payload, format='json')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['error'], 'Please select an academic year before assigning teachers.')
        self.assertFalse(TeacherSubjectAssignment.objects.exists())

    def test_duplicate_is_rejected(self):
        self.client.post(URL, self._payload(self.t1), format='json')
        res = self.client.post(URL, self._payload(self.t1, is_primary=False), format='json')
        self.assertEqual(res.status_code, 400)
        self.assertIn('already assigned', res.data['error'])

    def test_delete_removes_the_row(self):
        assignment, _ = services.create_assignment(self.campus, self.t1, self.math7, self.sec7a, self.year)
        res = self.client.delete(f'{URL}{assignment.id}/')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['message'], 'Teacher assignment removed successfully')
        self.assertFalse(TeacherSubjectAssignment.objects.exists())

        res = self.client.delete(f'{URL}{assignment.id}/')
        self.assertEqual(res.status_code, 404)

    def test_check_endpoint_reports_conflict(self):
        services.create_assignment(self.campus, self.t1, self.math7, self.sec7a, self.year)

        res = self.client.post(f'{URL}check/', self._payload(self.t2), format='json')
        self.assertEqual(res.status_code, 200)
        data = res.data['data']
        self.assertTrue(data['conflict'])
        self.assertTrue(data['blocking'])
        self.assertEqual(data['policy'], 'advisory')
        self.assertIn('Aziza Karimova', data['warning'])

        res = self.client.post(f'{URL}check/', self._payload(self.t2, is_primary=False), format='json')
        self.assertTrue(res.data['data']['conflict'])
        self.assertFalse(res.data['data']['blocking'])

        res = self.client.post(f'{URL}check/', self._payload(self.t1), format='json')
        self.assertFalse(res.data['data']['conflict'])
        self.assertEqual(res.data['data']['warning'], '')

    def test_teacher_role_can_read_but_not_create(self):
        self.client.force_authenticate(self.t1.user)
        self.assertEqual(self.client.get(URL).status_code, 200)
        res = self.client.post(URL, self._payload(self.t1), format='json')
        self.assertEqual(res.status_code, 403)
        self.assertFalse(TeacherSubjectAssignment.objects.exists())

    def test_user_without_campus_is_refused(self):
        self.client.force_authenticate(make_user('+998900000777', role='admin'))
        res = self.client.get(URL)
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data['error'], 'Campus membership required.')

    def test_anonymous_is_refused(self):
        self.client.force_authenticate(None)
        res = self.client.get(URL)
        self.assertEqual(res.status_code, 401)
