"""
Patient endpoints.

Admins and doctors manage the patient directory; only admins may delete.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from clinic.exceptions import require_fields
from clinic.models import Patient
from clinic.permissions import ADMIN_ONLY, STAFF_ROLES, RoleGatedAPIView, allow_roles
from clinic.serializers.patient import PatientSearchSerializer, PatientSerializer
from clinic.views.common import get_or_404, save_unique

PATIENT_FIELDS = ("name", "email", "phone", "date_of_birth", "gender", "address")


@api_view(["GET", "POST"])
@permission_classes([allow_roles(*STAFF_ROLES)])
def patients(request):
    if request.method == "POST":
        require_fields(request.data, ("name", "email"))
        s = PatientSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = save_unique(s, "A patient with this email already exists")
        return Response(
            {"message": "Patient added successfully!", "patient_id": patient.patient_id},
            status=status.HTTP_201_CREATED,
        )
    qs = Patient.objects.order_by("patient_id")
    return Response(PatientSerializer(qs, many=True).data)


@api_view(["GET"])
@permission_classes([allow_roles(*STAFF_ROLES)])
def search_patients(request):
    q = PatientSearchSerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Patient.objects.order_by("patient_id")
    for field in ("name", "email", "phone"):
        value = q.validated_data.get(field)
        if value:
            qs = qs.filter(**{f"{field}__icontains": value})
    return Response(PatientSerializer(qs, many=True).data)


class PatientDetail(RoleGatedAPIView):
    allowed_roles = {"PUT": STAFF_ROLES, "DELETE": ADMIN_ONLY}

    def put(self, request, patient_id: int):
        require_fields(request.data, PATIENT_FIELDS, "All fields are required")
        patient = get_or_404(Patient, patient_id, "Patient not found")
        s = PatientSerializer(patient, data=request.data)
        s.is_valid(raise_exception=True)
        save_unique(s, "A patient with this email already exists")
        return Response({"message": "Patient updated successfully!"})

    def delete(self, request, patient_id: int):
        patient = get_or_404(Patient, patient_id, "Patient not found")
        patient.delete()
        return Response({"message": "Patient deleted successfully!"})
