from django.conf import settings
from django.contrib.auth.base_user import BaseUserManager


class UserManager(BaseUserManager):
    use_in_migrations = True

    @staticmethod
    def normalize_phone(phone: str):
        """Keep digits and '+'. A bare number starting with PHONE_COUNTRY_CODE gets a leading '+'."""
        if not phone:
            return phone
        p = ''.join(ch for ch in phone if ch.isdigit() or ch == '+')
        country = getattr(settings, 'PHONE_COUNTRY_CODE', '')
        if country and not p.startswith('+') and p.startswith(country):
            p = f'+{p}'
        return p

    def get_by_natural_key(self, phone):
        return self.get(**{self.model.USERNAME_FIELD: self.normalize_phone(phone)})

    def _create(self, phone, password, **extra_fields):
        if not phone:
            raise ValueError('Phone is required')
        role = extra_fields.get('role')
        if role and role not in dict(self.model.ROLES):
            raise ValueError(f'Unknown role {role!r}')
        user = self.model(phone=self.normalize_phone(phone), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, phone, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create(phone, password, **extra_fields)

    def create_superuser(self, phone, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', 'admin')
        if not (extra_fields['is_staff'] and extra_fields['is_superuser']):
            raise ValueError('Superuser must have is_staff=True and is_superuser=True.')
        return self._create(phone, password, **extra_fields)
