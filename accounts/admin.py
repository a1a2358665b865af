from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import ReadOnlyPasswordHashField

from .models import Campus, School, User


class PhoneFormMixin:
    def clean_phone(self):
        phone = User.objects.normalize_phone(self.cleaned_data.get("phone"))
        clash = User.objects.filter(phone=phone)
        if self.instance.pk:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise forms.ValidationError("A user with this phone already exists.")
        return phone


class UserCreationForm(PhoneFormMixin, forms.ModelForm):
    password = forms.CharField(label="Password", widget=forms.PasswordInput)
    confirm = forms.CharField(label="Repeat password", widget=forms.PasswordInput)

    class Meta:
        model = User
        fields = ("phone", "first_name", "last_name", "role", "campus")

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("password") != cleaned.get("confirm"):
            self.add_error("confirm", "Passwords don't match")
        return cleaned

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
        return user


class UserChangeForm(PhoneFormMixin, forms.ModelForm):
    password = ReadOnlyPasswordHashField()

    class Meta:
        model = User
        fields = ("phone", "password", "first_name", "last_name", "email", "role", "campus",
                  "is_active", "is_staff", "is_superuser", "groups", "user_permissions")


class CampusScopedAdmin(admin.ModelAdmin):
    """Staff without superuser rights only see rows of their own campus."""
    campus_lookup = "campus"

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if request.user.is_superuser:
            return qs
        return qs.filter(**{f"{self.campus_lookup}_id": request.user.campus_id})


@admin.register(User)
class UserAdmin(CampusScopedAdmin, BaseUserAdmin):
    add_form = UserCreationForm
    form = UserChangeForm
    list_display = ("phone", "full_name", "role", "campus", "is_active", "last_login")
    list_filter = ("role", "campus", "is_active", "is_staff")
    list_select_related = ("campus",)
    ordering = ("last_name", "first_name")
    search_fields = ("phone", "first_name", "last_name", "email")

    fieldsets = (
        ("Login", {"fields": ("phone", "password")}),
        ("Profile", {"fields": ("first_name", "last_name", "email")}),
        ("School", {"fields": ("role", "campus")}),
        ("Access", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("phone", "first_name", "last_name", "role", "campus", "password", "confirm"),
        }),
    )


@admin.register(School)
class SchoolAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "created_at")
    search_fields = ("name", "code")


@admin.register(Campus)
class CampusAdmin(CampusScopedAdmin):
    campus_lookup = "id"
    list_display = ("name", "code", "school", "is_active")
    list_filter = ("school", "is_active")
    search_fields = ("name", "code")
