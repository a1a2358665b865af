from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .managers import UserManager
from .models import Campus, User

# roles a registrar may hand out; admin and registrar accounts need an admin
REGISTRAR_ASSIGNABLE_ROLES = ('teacher', 'operator', 'accountant', 'parent')


class CampusSerializer(serializers.ModelSerializer):
    school_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Campus
        fields = ('id', 'name', 'code', 'school_id', 'is_active')


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ('id', 'phone', 'first_name', 'last_name', 'role', 'campus')


class RegisterUserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=4)

    class Meta:
        model = User
        fields = ('id', 'phone', 'first_name', 'last_name', 'role', 'campus', 'password')

    def validate_phone(self, value):
        phone = UserManager.normalize_phone(value)
        if User.objects.filter(phone=phone).exists():
            raise serializers.ValidationError('A user with this phone already exists.')
        return phone

    def validate_role(self, value):
        request = self.context.get('request')
        creator = getattr(request, 'user', None)
        if creator is None or creator.is_superuser or creator.role == 'admin':
            return value
        if value not in REGISTRAR_ASSIGNABLE_ROLES:
            raise serializers.ValidationError(f"You cannot create users with the '{value}' role.")
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        # registrars can only add people to their own campus
        request = self.context.get('request')
        creator = getattr(request, 'user', None)
        if creator is not None and not creator.is_superuser and creator.campus_id:
            validated_data['campus'] = creator.campus
        return User.objects.create_user(password=password, **validated_data)


class PhoneTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        token['first_name'] = user.first_name
        token['last_name'] = user.last_name
        token['campus_id'] = user.campus_id
        return token

    def validate(self, attrs):
        phone = attrs.get(self.username_field)
        if phone:
            attrs[self.username_field] = UserManager.normalize_phone(phone)
        return super().validate(attrs)
