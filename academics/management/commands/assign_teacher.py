from django.core.management.base import BaseCommand, CommandError

from academics import services
from academics.exceptions import WorkloadError
from academics.models import AcademicYear, GradeLevel, Section, Subject, Teacher
from academics.workload import AssignmentForm
from accounts.models import Campus


class Command(BaseCommand):
    help = 'Assign a teacher to a subject and section (grade -> section -> subject), like the workload page'

    def add_arguments(self, parser):
        parser.add_argument('--campus', type=int, required=True, help='Campus id')
        parser.add_argument('--teacher', required=True, help='Teacher employee number')
        parser.add_argument('--grade', required=True, help='Grade level name')
        parser.add_argument('--section', required=True, help='Section name within the grade')
        parser.add_argument('--subject', required=True, help='Subject code')
        parser.add_argument('--year', type=int, help='Academic year id (defaults to the current year)')
        parser.add_argument('--secondary', action='store_true', help='Assign as assistant/substitute')

    def handle(self, *args, **options):
        try:
            campus = Campus.objects.get(pk=options['campus'])
        except Campus.DoesNotExist:
            raise CommandError(f"Campus {options['campus']} not found")

        if options['year']:
            year = AcademicYear.objects.filter(pk=options['year'], campus=campus).first()
        else:
            year = services.current_academic_year(campus)
        if year is None:
            raise CommandError('No academic year given and the campus has no current year')

        teacher = self._lookup(Teacher, campus, employee_number=options['teacher'])
        grade = self._lookup(GradeLevel, campus, name=options['grade'])
        section = self._lookup(Section, campus, grade_level=grade, name=options['section'])
        subject = self._lookup(Subject, campus, code=options['subject'])

        form = AssignmentForm(services.load_reference_data(campus), academic_year_id=year.id)
        try:
            form.select_teacher(teacher.id)
            form.select_grade(grade.id)
            form.select_section(section.id)
            form.select_subject(subject.id)
        except WorkloadError as exc:
            raise CommandError(str(exc.detail))
        form.set_primary(not options['secondary'])

        if form.conflict_warning:
            self.stdout.write(self.style.WARNING(form.conflict_warning))

        def create(payload):
            assignment, _ = services.create_assignment_from_payload(campus, payload)
            return assignment

        created = form.submit(create, reload=lambda: services.load_reference_data(campus))
        if created is None:
            raise CommandError(form.error)

        self.stdout.write(self.style.SUCCESS(f'Created assignment #{created.id}: {created}'))

    def _lookup(self, model, campus, **filters):
        obj = model.objects.filter(campus=campus, **filters).first()
        if obj is None:
            desc = ', '.join(f'{k}={v}' for k, v in filters.items() if not hasattr(v, 'pk'))
            raise CommandError(f'{model._meta.verbose_name.capitalize()} not found ({desc})')
        return obj
