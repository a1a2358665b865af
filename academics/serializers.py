from rest_framework import serializers

from accounts.models import User

from .models import AcademicYear, GradeLevel, Section, Subject, Teacher, TeacherSubjectAssignment


class CampusUniqueMixin:
    """
    Checks the per-campus unique constraints before saving. ``campus`` is not a
    serializer field, so DRF cannot derive these validators itself.

    ``campus_unique`` holds ``(fields, message)`` pairs; the error is reported
    on the last field of each tuple.
    """
    campus_unique = ()

    def _request_campus_id(self):
        request = self.context.get('request')
        return getattr(getattr(request, 'user', None), 'campus_id', None)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        campus_id = self._request_campus_id()
        if campus_id is None:
            return attrs
        for fields, message in self.campus_unique:
            values = {f: attrs[f] if f in attrs else getattr(self.instance, f, None) for f in fields}
            if any(v is None for v in values.values()):
                continue
            clash = self.Meta.model.objects.filter(campus_id=campus_id, **values)
            if self.instance is not None:
                clash = clash.exclude(pk=self.instance.pk)
            if clash.exists():
                raise serializers.ValidationError({fields[-1]: message})
        return attrs


class AcademicYearSerializer(CampusUniqueMixin, serializers.ModelSerializer):
    campus_unique = (
        (('name',), 'An academic year with this name already exists.'),
    )

    class Meta:
        model = AcademicYear
        fields = ('id', 'name', 'start_date', 'end_date', 'is_current', 'is_active')
        read_only_fields = ('is_current',)

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end <= start:
            raise serializers.ValidationError({'end_date': 'End date must be after start date.'})
        return super().validate(attrs)


class GradeLevelSerializer(CampusUniqueMixin, serializers.ModelSerializer):
    campus_unique = (
        (('name',), 'A grade level with this name already exists.'),
        (('order_index',), 'Another grade level already uses this order.'),
    )

    class Meta:
        model = GradeLevel
        fields = ('id', 'name', 'order_index', 'is_active')


class CampusScopedRelatedField(serializers.PrimaryKeyRelatedField):
    """Only rows of the requesting user's campus are valid choices."""

    def get_queryset(self):
        qs = super().get_queryset()
        request = self.context.get('request')
        campus_id = getattr(getattr(request, 'user', None), 'campus_id', None)
        return qs.filter(campus_id=campus_id)


class SectionSerializer(CampusUniqueMixin, serializers.ModelSerializer):
    campus_unique = (
        (('grade_level', 'name'), 'A section with this name already exists in this grade.'),
    )
    grade_level_id = CampusScopedRelatedField(source='grade_level', queryset=GradeLevel.objects.all())
    grade_name = serializers.CharField(source='grade_level.name', read_only=True)

    class Meta:
        model = Section
        fields = ('id', 'name', 'grade_level_id', 'grade_name', 'capacity', 'is_active')

    def validate_capacity(self, value):
        if value < 1:
            raise serializers.ValidationError('Capacity must be positive.')
        return value


class SubjectSerializer(CampusUniqueMixin, serializers.ModelSerializer):
    campus_unique = (
        (('code',), 'A subject with this code already exists.'),
        (('grade_level', 'name'), 'A subject with this name already exists in this grade.'),
    )
    grade_level_id = CampusScopedRelatedField(source='grade_level', queryset=GradeLevel.objects.all())

    class Meta:
        model = Subject
        fields = ('id', 'name', 'code', 'subject_type', 'grade_level_id', 'is_active')


class TeacherSerializer(serializers.ModelSerializer):
    user = CampusScopedRelatedField(queryset=User.objects.all(), write_only=True)
    profile = serializers.SerializerMethodField()
    photo_url = serializers.SerializerMethodField()

    class Meta:
        model = Teacher
        fields = (
            'id', 'user', 'profile', 'employee_number', 'title', 'department', 'specialization',
            'date_of_joining', 'employment_type', 'is_active', 'photo_url', 'notes',
        )

    def get_profile(self, obj):
        u = obj.user
        return {'id': u.id, 'first_name': u.first_name, 'last_name': u.last_name, 'phone': u.phone}

    def get_photo_url(self, obj):
        if not obj.photo:
            return None
        request = self.context.get('request')
        return request.build_absolute_uri(obj.photo.url) if request else obj.photo.url


class TeacherSubjectAssignmentSerializer(serializers.ModelSerializer):
    teacher_id = serializers.IntegerField(read_only=True)
    subject_id = serializers.IntegerField(read_only=True)
    section_id = serializers.IntegerField(read_only=True)
    academic_year_id = serializers.IntegerField(read_only=True)
    teacher_name = serializers.CharField(read_only=True)
    subject_name = serializers.CharField(read_only=True)
    section_name = serializers.CharField(read_only=True)
    grade_name = serializers.CharField(read_only=True)
    academic_year_name = serializers.CharField(source='academic_year.name', read_only=True)

    class Meta:
        model = TeacherSubjectAssignment
        fields = (
            'id', 'teacher_id', 'subject_id', 'section_id', 'academic_year_id', 'is_primary', 'assigned_at',
            'teacher_name', 'subject_name', 'section_name', 'grade_name', 'academic_year_name',
        )


class AssignmentCandidateSerializer(serializers.Serializer):
    """Payload of the create form: ids only, resolved against the campus later."""
    teacher_id = serializers.IntegerField()
    subject_id = serializers.IntegerField()
    section_id = serializers.IntegerField()
    academic_year_id = serializers.IntegerField(required=False, allow_null=True)
    is_primary = serializers.BooleanField(default=True)
