from django.test import SimpleTestCase

from academics import workload


class CascadingFilterTests(SimpleTestCase):
    def setUp(self):
        self.sections = [
            {'id': 's1', 'name': 'A', 'grade_level_id': 'g1', 'is_active': True},
            {'id': 's2', 'name': 'A', 'grade_level_id': 'g2', 'is_active': True},
            {'id': 's3', 'name': 'B', 'grade_level_id': 'g1', 'is_active': False},
        ]
        self.subjects = [
            {'id': 'sub1', 'name': 'Maths', 'grade_level_id': 'g1', 'is_active': True},
            {'id': 'sub2', 'name': 'Physics', 'grade_level_id': 'g2', 'is_active': True},
        ]

    def test_selecting_grade_keeps_only_its_active_sections(self):
        self.assertEqual(workload.filter_for_grade(self.sections, 'g1'), [self.sections[0]])

    def test_no_grade_selected_means_no_children(self):
        self.assertEqual(workload.filter_for_grade(self.sections, ''), [])
        self.assertEqual(workload.filter_for_grade(self.sections, None), [])

    def test_grade_without_sections_yields_empty_list(self):
        self.assertEqual(workload.filter_for_grade(self.sections, 'g9'), [])

    def test_ids_compare_by_string_form(self):
        rows = [{'id': 1, 'grade_level_id': 7, 'is_active': True}]
        self.assertEqual(workload.filter_for_grade(rows, '7'), rows)

    def test_cascade_options_filters_sections_and_subjects(self):
        opts = workload.cascade_options('g2', self.sections, self.subjects)
        self.assertEqual([s['id'] for s in opts.sections], ['s2'])
        self.assertEqual([s['id'] for s in opts.subjects], ['sub2'])

    def test_active_grade_levels_sorted_by_order_index(self):
        grades = [
            {'id': 'g3', 'order_index': 3, 'is_active': True},
            {'id': 'g1', 'order_index': 1, 'is_active': True},
            {'id': 'g2', 'order_index': 2, 'is_active': False},
        ]
        self.assertEqual([g['id'] for g in workload.active_grade_levels(grades)], ['g1', 'g3'])


class ConflictDetectorTests(SimpleTestCase):
    def setUp(self):
        self.teachers = [
            {'id': 't1', 'profile': {'first_name': 'Aziza', 'last_name': 'Karimova'}},
            {'id': 't2', 'profile': {'first_name': 'Bobur', 'last_name': 'Aliev'}},
        ]
        self.assignments = [
            {'id': 'a1', 'teacher_id': 't1', 'subject_id': 'sub1', 'section_id': 'sec1',
             'academic_year_id': 'ay1', 'is_primary': True},
        ]

    def test_other_primary_teacher_is_reported_by_name(self):
        candidate = {'teacher_id': 't2', 'subject_id': 'sub1', 'section_id': 'sec1'}
        warning = workload.primary_conflict_warning(candidate, 'ay1', self.assignments, self.teachers)
        self.assertEqual(warning, 'Aziza Karimova is already the primary teacher for this subject-section combination.')

    def test_flattened_teacher_name_wins(self):
        rows = [dict(self.assignments[0], teacher_name='Ms. Karimova')]
        candidate = {'teacher_id': 't2', 'subject_id': 'sub1', 'section_id': 'sec1'}
        self.assertTrue(workload.primary_conflict_warning(candidate, 'ay1', rows).startswith('Ms. Karimova '))

    def test_unknown_teacher_fallback(self):
        candidate = {'teacher_id': 't2', 'subject_id': 'sub1', 'section_id': 'sec1'}
        warning = workload.primary_conflict_warning(candidate, 'ay1', self.assignments)
        self.assertTrue(warning.startswith('Unknown Teacher '))

    def test_same_teacher_is_not_a_conflict(self):
        candidate = {'teacher_id': 't1', 'subject_id': 'sub1', 'section_id': 'sec1'}
        self.assertIsNone(workload.find_primary_conflict(candidate, 'ay1', self.assignments))

    def test_other_year_secondary_or_other_section_do_not_conflict(self):
        candidate = {'teacher_id': 't2', 'subject_id': 'sub1', 'section_id': 'sec1'}
        self.assertIsNone(workload.find_primary_conflict(candidate, 'ay2', self.assignments))

        secondary = [dict(self.assignments[0], is_primary=False)]
        self.assertIsNone(workload.find_primary_conflict(candidate, 'ay1', secondary))

        elsewhere = dict(candidate, section_id='sec2')
        self.assertIsNone(workload.find_primary_conflict(elsewhere, 'ay1', self.assignments))

    def test_incomplete_candidate_never_conflicts(self):
        candidate = {'teacher_id': '', 'subject_id': 'sub1', 'section_id': 'sec1'}
        self.assertEqual(workload.primary_conflict_warning(candidate, 'ay1', self.assignments), '')

    def test_first_match_in_list_order_wins(self):
        rows = self.assignments + [
            {'id': 'a2', 'teacher_id': 't3', 'subject_id': 'sub1', 'section_id': 'sec1',
             'academic_year_id': 'ay1', 'is_primary': True},
        ]
        candidate = {'teacher_id': 't2', 'subject_id': 'sub1', 'section_id': 'sec1'}
        self.assertEqual(workload.find_primary_conflict(candidate, 'ay1', rows)['id'], 'a1')


class AssignmentTableTests(SimpleTestCase):
    def setUp(self):
        self.rows = [
            {'id': 1, 'teacher_id': 't1', 'teacher_name': 'Aziza Karimova', 'subject_name': 'Mathematics',
             'section_name': 'A', 'academic_year_id': 'ay1', 'is_primary': True},
            {'id': 2, 'teacher_id': 't1', 'teacher_name': 'Aziza Karimova', 'subject_name': 'Science',
             'section_name': 'B', 'academic_year_id': 'ay1', 'is_primary': False},
            {'id': 3, 'teacher_id': 't2', 'teacher_name': 'Bobur Aliev', 'subject_name': 'Mathematics',
             'section_name': 'B', 'academic_year_id': 'ay2', 'is_primary': True},
        ]

    def test_search_is_case_insensitive_over_teacher_subject_and_section(self):
        self.assertEqual([r['id'] for r in workload.filter_assignments(self.rows, 'KARIM')], [1, 2])
        self.assertEqual([r['id'] for r in workload.filter_assignments(self.rows, 'scie')], [2])
        self.assertEqual([r['id'] for r in workload.filter_assignments(self.rows, 'b')], [2, 3])

    def test_empty_search_keeps_everything(self):
        self.assertEqual(len(workload.filter_assignments(self.rows, '')), 3)

    def test_teacher_and_year_filters(self):
        self.assertEqual([r['id'] for r in workload.filter_assignments(self.rows, teacher_id='t2')], [3])
        self.assertEqual([r['id'] for r in workload.filter_assignments(self.rows, academic_year_id='ay1')], [1, 2])

    def test_grouping_and_summary(self):
        groups = workload.group_by_teacher(self.rows)
        self.assertEqual(list(groups), ['t1', 't2'])
        self.assertEqual(len(groups['t1']), 2)
        self.assertEqual(
            workload.workload_summary(self.rows),
            {'total_assignments': 3, 'active_teachers': 2, 'primary_assignments': 2},
        )
