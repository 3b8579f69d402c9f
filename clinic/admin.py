"""Django admin registrations; the only way to edit or remove identities."""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Appointment, Doctor, MedicalRecord, Patient, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("id", "email", "name", "role", "is_active")
    list_filter = ("role", "is_active")
    search_fields = ("email", "name")
    ordering = ("id",)
    fieldsets = BaseUserAdmin.fieldsets + (("Clinic", {"fields": ("name", "role")}),)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("patient_id", "name", "email", "phone")
    search_fields = ("name", "email", "phone")


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ("doctor_id", "name", "specialization", "email")
    search_fields = ("name", "specialization")


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("appointment_id", "patient", "doctor", "appointment_date", "status")
    list_filter = ("status",)


admin.site.register(MedicalRecord)
