"""
URL mappings for the clinic API.

Paths carry no trailing slash, matching what existing clients call.
"""
from django.urls import include, path

from .auth_views import login_view, register_view, token_validate_view
from .views import appointments, doctors, health, patients, records

urlpatterns = [
    path("", health.index, name="index"),
    path("healthz", health.healthz, name="healthz"),
    path("", include("django_prometheus.urls")),
    # identities
    path("register", register_view, name="register"),
    path("login", login_view, name="login"),
    path("token/validate", token_validate_view, name="token-validate"),
    # patients
    path("patients", patients.patients, name="patients"),
    path("patients/search", patients.search_patients, name="patients-search"),
    path("patients/<int:patient_id>", patients.PatientDetail.as_view(), name="patient-detail"),
    # doctors
    path("doctors", doctors.DoctorList.as_view(), name="doctors"),
    path("doctors/search", doctors.search_doctors, name="doctors-search"),
    path("doctors/<int:doctor_id>", doctors.DoctorDetail.as_view(), name="doctor-detail"),
    # appointments
    path("appointments", appointments.appointments, name="appointments"),
    path("appointments/filter", appointments.filter_appointments, name="appointments-filter"),
    path("appointments/<int:appointment_id>", appointments.AppointmentDetail.as_view(), name="appointment-detail"),
    # medical records
    path("medical-records", records.medical_records, name="medical-records"),
    path("medical-records/<int:record_id>", records.MedicalRecordDetail.as_view(), name="medical-record-detail"),
]
