"""
Integration tests for the clinic resource routes.

Each test drives the API through DRF's APIClient with a bearer token for
the relevant role, covering access control, validation, 404 handling and
the appointment broadcast.
"""
import pytest
from django.db import OperationalError
from django.urls import reverse

from clinic.models import Appointment, Doctor, MedicalRecord, Patient
from clinic.realtime.broadcaster import broadcaster
from clinic.views import health

pytestmark = pytest.mark.django_db


class RecordingConnection:
    def __init__(self):
        self.events = []

    async def send_event(self, event):
        self.events.append(event)


class BrokenConnection:
    async def send_event(self, event):
        raise ConnectionResetError("listener went away")


@pytest.fixture
def listener():
    conn = RecordingConnection()
    broadcaster.register(conn)
    yield conn
    broadcaster.unregister(conn)


def appointment_body(patient, doctor, **extra):
    body = {
        "patient_id": patient.patient_id,
        "doctor_id": doctor.doctor_id,
        "appointment_date": "2025-03-10 10:00:00",
        "reason": "Checkup",
    }
    body.update(extra)
    return body


# ---------------------------------------------------------------------
# public routes
# ---------------------------------------------------------------------
def test_root_reports_running(api_client):
    r = api_client.get("/")
    assert r.status_code == 200
    assert r.json() == {"message": "SmartHealthcare API is running!"}


def test_healthz_checks_database(api_client):
    r = api_client.get(reverse("healthz"))
    assert r.json() == {"ok": True, "db": True}


# ---------------------------------------------------------------------
# patients
# ---------------------------------------------------------------------
def test_doctor_lists_and_creates_patients(doctor_client, patient):
    r = doctor_client.get(reverse("patients"))
    assert r.status_code == 200
    assert [p["email"] for p in r.data] == ["john@example.com"]

    r = doctor_client.post(reverse("patients"), {"name": "Jane", "email": "jane@example.com"}, format="json")
    assert r.status_code == 201
    assert r.data["message"] == "Patient added successfully!"
    assert Patient.objects.get(pk=r.data["patient_id"]).name == "Jane"


def test_patient_create_requires_name_and_email(admin_client):
    r = admin_client.post(reverse("patients"), {"name": "Jane"}, format="json")
    assert r.status_code == 400
    assert r.data["error"] == "All fields are required!"


def test_patient_duplicate_email_conflicts(admin_client, patient):
    r = admin_client.post(reverse("patients"), {"name": "Dup", "email": patient.email}, format="json")
    assert r.status_code == 409
    assert r.data["code"] == "conflict"


def test_patient_search_filters_by_substring(doctor_client, patient):
    Patient.objects.create(name="Mary Major", email="mary@example.com", phone="555-0200")
    r = doctor_client.get(reverse("patients-search"), {"name": "doe"})
    assert [p["name"] for p in r.data] == ["John Doe"]
    r = doctor_client.get(reverse("patients-search"), {"phone": "555-0"})
    assert len(r.data) == 2


def test_patient_update_requires_every_field(doctor_client, patient):
    url = reverse("patient-detail", args=[patient.patient_id])
    r = doctor_client.put(url, {"name": "John"}, format="json")
    assert r.status_code == 400
    assert r.data["error"] == "All fields are required"

    body = {
        "name": "John Q. Doe",
        "email": "john@example.com",
        "phone": "555-0101",
        "date_of_birth": "1980-01-31",
        "gender": "M",
        "address": "1 Main St",
    }
    r = doctor_client.put(url, body, format="json")
    assert r.status_code == 200
    patient.refresh_from_db()
    assert patient.name == "John Q. Doe"
    assert str(patient.date_of_birth) == "1980-01-31"


def test_patient_update_unknown_id_is_404(admin_client):
    body = dict(name="a", email="a@example.com", phone="1", date_of_birth="1990-01-01", gender="F", address="x")
    r = admin_client.put(reverse("patient-detail", args=[404]), body, format="json")
    assert r.status_code == 404
    assert r.data == {"ok": False, "code": "not_found", "error": "Patient not found"}


def test_only_admin_deletes_patients(admin_client, doctor_client, patient):
    url = reverse("patient-detail", args=[patient.patient_id])
    assert doctor_client.delete(url).status_code == 403
    assert admin_client.delete(url).status_code == 200
    assert not Patient.objects.exists()
    assert admin_client.delete(url).status_code == 404


def test_patient_routes_refuse_patients(patient_client, patient):
    assert patient_client.get(reverse("patients")).status_code == 403
    assert patient_client.get(reverse("patients-search")).status_code == 403


# ---------------------------------------------------------------------
# doctors
# ---------------------------------------------------------------------
def test_every_role_lists_doctors(patient_client, doctor_client, doctor):
    for c in (patient_client, doctor_client):
        r = c.get(reverse("doctors"))
        assert r.status_code == 200
        assert r.data[0]["specialization"] == "Cardiology"


def test_only_admin_adds_doctors(admin_client, doctor_client):
    body = {"name": "House", "specialization": "Diagnostics", "email": "house@example.com", "phone": "555-0300"}
    assert doctor_client.post(reverse("doctors"), body, format="json").status_code == 403
    r = admin_client.post(reverse("doctors"), body, format="json")
    assert r.status_code == 201
    assert Doctor.objects.filter(pk=r.data["doctor_id"]).exists()


def test_doctor_create_requires_all_fields(admin_client):
    r = admin_client.post(reverse("doctors"), {"name": "House"}, format="json")
    assert r.status_code == 400


def test_doctor_search_is_staff_only(doctor_client, patient_client, doctor):
    r = doctor_client.get(reverse("doctors-search"), {"specialization": "cardio"})
    assert [d["name"] for d in r.data] == ["Grey"]
    assert patient_client.get(reverse("doctors-search")).status_code == 403


def test_doctor_update_and_delete(admin_client, doctor):
    url = reverse("doctor-detail", args=[doctor.doctor_id])
    body = {"name": "Grey", "specialization": "Surgery", "email": "grey@example.com", "phone": "555-0199"}
    assert admin_client.put(url, body, format="json").status_code == 200
    doctor.refresh_from_db()
    assert doctor.specialization == "Surgery"
    assert admin_client.delete(url).status_code == 200
    r = admin_client.put(url, body, format="json")
    assert r.status_code == 404
    assert r.data["error"] == "Doctor not found."


# ---------------------------------------------------------------------
# appointments
# ---------------------------------------------------------------------
def test_create_appointment_broadcasts_event(doctor_client, patient, doctor, listener):
    r = doctor_client.post(reverse("appointments"), appointment_body(patient, doctor), format="json")
    assert r.status_code == 201
    assert r.data["message"] == "Appointment scheduled successfully!"
    appt = Appointment.objects.get(pk=r.data["appointment_id"])
    assert appt.status == "Scheduled"

    assert len(listener.events) == 1
    event = listener.events[0]
    assert event["type"] == "NEW_APPOINTMENT"
    assert event["message"] == (
        f"New appointment scheduled for Patient {patient.patient_id} "
        f"with Doctor {doctor.doctor_id} on 2025-03-10 10:00:00"
    )
    assert event["data"] == {
        "appointment_id": appt.appointment_id,
        "patient_id": patient.patient_id,
        "doctor_id": doctor.doctor_id,
        "appointment_date": "2025-03-10 10:00:00",
        "reason": "Checkup",
        "status": "Scheduled",
    }


def test_failed_listener_does_not_fail_the_request(admin_client, patient, doctor, listener):
    broken = BrokenConnection()
    broadcaster.register(broken)
    try:
        r = admin_client.post(reverse("appointments"), appointment_body(patient, doctor), format="json")
        assert r.status_code == 201
        assert len(listener.events) == 1
        assert broken not in broadcaster.registry
    finally:
        broadcaster.unregister(broken)


def test_rejected_appointment_is_not_broadcast(doctor_client, patient, doctor, listener):
    r = doctor_client.post(reverse("appointments"), appointment_body(patient, doctor, reason=""), format="json")
    assert r.status_code == 400
    r = doctor_client.post(reverse("appointments"), appointment_body(patient, doctor, doctor_id=9999), format="json")
    assert r.status_code == 400
    assert r.data["code"] == "validation_error"
    assert listener.events == []
    assert not Appointment.objects.exists()


def test_patients_cannot_schedule(patient_client, patient, doctor, listener):
    r = patient_client.post(reverse("appointments"), appointment_body(patient, doctor), format="json")
    assert r.status_code == 403
    assert listener.events == []


def test_filter_appointments_by_day_and_status(doctor_client, patient, doctor):
    Appointment.objects.create(patient=patient, doctor=doctor, appointment_date="2025-03-10T09:00:00Z", reason="a")
    Appointment.objects.create(
        patient=patient, doctor=doctor, appointment_date="2025-03-10T15:00:00Z", reason="b", status="Completed"
    )
    Appointment.objects.create(patient=patient, doctor=doctor, appointment_date="2025-03-11T09:00:00Z", reason="c")

    r = doctor_client.get(reverse("appointments-filter"), {"date": "2025-03-10"})
    assert [a["reason"] for a in r.data] == ["a", "b"]
    r = doctor_client.get(reverse("appointments-filter"), {"date": "2025-03-10", "status": "Scheduled"})
    assert [a["reason"] for a in r.data] == ["a"]
    r = doctor_client.get(reverse("appointments-filter"), {"status": "Scheduled"})
    assert [a["reason"] for a in r.data] == ["a", "c"]
    assert doctor_client.get(reverse("appointments-filter"), {"date": "10/03/2025"}).status_code == 400


def test_appointment_status_update_and_delete(admin_client, doctor_client, patient, doctor):
    appt = Appointment.objects.create(patient=patient, doctor=doctor, appointment_date="2025-03-10T09:00:00Z")
    url = reverse("appointment-detail", args=[appt.appointment_id])

    r = doctor_client.put(url, {}, format="json")
    assert r.status_code == 400
    assert r.data["error"] == "Status is required"
    assert doctor_client.put(url, {"status": "Completed"}, format="json").status_code == 200
    appt.refresh_from_db()
    assert appt.status == "Completed"

    assert doctor_client.delete(url).status_code == 403
    assert admin_client.delete(url).status_code == 200
    assert admin_client.put(url, {"status": "Cancelled"}, format="json").status_code == 404


def test_deleting_patient_cascades(admin_client, patient, doctor):
    Appointment.objects.create(patient=patient, doctor=doctor, appointment_date="2025-03-10T09:00:00Z")
    MedicalRecord.objects.create(patient=patient, doctor=doctor, diagnosis="Flu", prescription="Rest")
    admin_client.delete(reverse("patient-detail", args=[patient.patient_id]))
    assert not Appointment.objects.exists()
    assert not MedicalRecord.objects.exists()


# ---------------------------------------------------------------------
# medical records
# ---------------------------------------------------------------------
def test_medical_record_lifecycle(admin_client, doctor_client, patient, doctor):
    body = {"patient_id": patient.patient_id, "doctor_id": doctor.doctor_id, "diagnosis": "Flu", "prescription": "Rest"}
    r = doctor_client.post(reverse("medical-records"), body, format="json")
    assert r.status_code == 201
    url = reverse("medical-record-detail", args=[r.data["record_id"]])

    r = doctor_client.get(reverse("medical-records"))
    assert r.data[0]["diagnosis"] == "Flu"

    r = doctor_client.put(url, {"diagnosis": "Cold"}, format="json")
    assert r.status_code == 400
    assert r.data["error"] == "Diagnosis and prescription are required"
    r = doctor_client.put(url, {"diagnosis": "Cold", "prescription": "Tea"}, format="json")
    assert r.status_code == 200
    assert MedicalRecord.objects.get().prescription == "Tea"

    assert doctor_client.delete(url).status_code == 403
    assert admin_client.delete(url).status_code == 200
    r = admin_client.delete(url)
    assert r.status_code == 404
    assert r.data["error"] == "Medical record not found"


def test_medical_record_create_requires_fields(doctor_client, patient):
    r = doctor_client.post(reverse("medical-records"), {"patient_id": patient.patient_id}, format="json")
    assert r.status_code == 400
    assert r.data["code"] == "validation_error"


def test_patients_cannot_read_medical_records(patient_client):
    assert patient_client.get(reverse("medical-records")).status_code == 403


def test_non_object_body_on_create_routes_is_400(admin_client, doctor_client):
    r = doctor_client.post(reverse("appointments"), ["x"], format="json")
    assert r.status_code == 400
    assert r.data["code"] == "validation_error"
    for route in ("patients", "doctors", "medical-records"):
        assert admin_client.post(reverse(route), "plain", format="json").status_code == 400


class _BrokenDatabase:
    def cursor(self):
        raise OperationalError("could not connect to server at 10.0.0.5")


def test_healthz_failure_uses_error_envelope(api_client, monkeypatch):
    monkeypatch.setattr(health, "connections", {"default": _BrokenDatabase()})
    r = api_client.get(reverse("healthz"))
    assert r.status_code == 500
    assert r.json() == {"ok": False, "code": "internal_error", "error": "Database unavailable"}
