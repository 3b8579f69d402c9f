"""
Database models for the clinic API.

The identity model doubles as the credential store consulted at login.
The clinic entities mirror the tables of the legacy SmartHealthcare
schema (patients, doctors, appointments and medical records) so that the
JSON responses keep the familiar ``*_id`` field names.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    """Access tier carried by every identity and every session token."""
    ADMIN = "Admin", "Admin"
    DOCTOR = "Doctor", "Doctor"
    PATIENT = "Patient", "Patient"


class User(AbstractUser):
    """Identity record: display name, unique email, password hash and role.

    ``username`` is kept for Django admin compatibility and always mirrors
    the email address; logins go through the email.
    """
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.PATIENT, db_index=True)

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Patient(models.Model):
    patient_id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=32, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=16, blank=True)
    address = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.patient_id})"


class Doctor(models.Model):
    doctor_id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255)
    specialization = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=32)

    def __str__(self) -> str:
        return f"Dr. {self.name} ({self.specialization})"


class Appointment(models.Model):
    STATUS_SCHEDULED = "Scheduled"

    appointment_id = models.BigAutoField(primary_key=True)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="appointments")
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="appointments")
    appointment_date = models.DateTimeField()
    reason = models.TextField(blank=True)
    # Free-form workflow status; filtered on by the appointments filter route.
    status = models.CharField(max_length=32, default=STATUS_SCHEDULED, db_index=True)

    class Meta:
        indexes = [
            models.Index(fields=["appointment_date"], name="clinic_appt_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Appointment {self.appointment_id}: p={self.patient_id} d={self.doctor_id} @ {self.appointment_date:%F %T}"


class MedicalRecord(models.Model):
    record_id = models.BigAutoField(primary_key=True)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="medical_records")
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name="medical_records")
    diagnosis = models.TextField()
    prescription = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Record {self.record_id} for patient {self.patient_id}"
