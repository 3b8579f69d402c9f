from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from clinic.exceptions import require_fields
from clinic.models import Doctor
from clinic.permissions import ADMIN_ONLY, ALL_ROLES, STAFF_ROLES, RoleGatedAPIView, allow_roles
from clinic.serializers.doctor import DoctorSearchSerializer, DoctorSerializer
from clinic.views.common import get_or_404, save_unique

DOCTOR_FIELDS = ("name", "specialization", "email", "phone")


class DoctorList(RoleGatedAPIView):
    """Every role may browse doctors; only admins add them."""
    allowed_roles = {"GET": ALL_ROLES, "POST": ADMIN_ONLY}

    def get(self, request):
        qs = Doctor.objects.order_by("doctor_id")
        return Response(DoctorSerializer(qs, many=True).data)

    def post(self, request):
        require_fields(request.data, DOCTOR_FIELDS)
        s = DoctorSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        doctor = save_unique(s, "A doctor with this email already exists")
        return Response(
            {"message": "Doctor added successfully!", "doctor_id": doctor.doctor_id},
            status=status.HTTP_201_CREATED,
        )


@api_view(["GET"])
@permission_classes([allow_roles(*STAFF_ROLES)])
def search_doctors(request):
    q = DoctorSearchSerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Doctor.objects.order_by("doctor_id")
    for field in ("name", "specialization"):
        value = q.validated_data.get(field)
        if value:
            qs = qs.filter(**{f"{field}__icontains": value})
    return Response(DoctorSerializer(qs, many=True).data)


class DoctorDetail(RoleGatedAPIView):
    allowed_roles = {"PUT": ADMIN_ONLY, "DELETE": ADMIN_ONLY}

    def put(self, request, doctor_id: int):
        require_fields(request.data, DOCTOR_FIELDS, "All fields are required")
        doctor = get_or_404(Doctor, doctor_id, "Doctor not found.")
        s = DoctorSerializer(doctor, data=request.data)
        s.is_valid(raise_exception=True)
        save_unique(s, "A doctor with this email already exists")
        return Response({"message": "Doctor updated successfully!"})

    def delete(self, request, doctor_id: int):
        get_or_404(Doctor, doctor_id, "Doctor not found.").delete()
        return Response({"message": "Doctor deleted successfully!"})
