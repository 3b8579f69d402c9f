from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from clinic.exceptions import require_fields
from clinic.models import MedicalRecord
from clinic.permissions import ADMIN_ONLY, STAFF_ROLES, RoleGatedAPIView, allow_roles
from clinic.serializers.record import MedicalRecordSerializer, MedicalRecordUpdateSerializer
from clinic.views.common import get_or_404


@api_view(["GET", "POST"])
@permission_classes([allow_roles(*STAFF_ROLES)])
def medical_records(request):
    if request.method == "POST":
        require_fields(request.data, ("patient_id", "doctor_id", "diagnosis", "prescription"))
        s = MedicalRecordSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record = s.save()
        return Response(
            {"message": "Medical record added successfully!", "record_id": record.record_id},
            status=status.HTTP_201_CREATED,
        )
    qs = MedicalRecord.objects.order_by("record_id")
    return Response(MedicalRecordSerializer(qs, many=True).data)


class MedicalRecordDetail(RoleGatedAPIView):
    allowed_roles = {"PUT": STAFF_ROLES, "DELETE": ADMIN_ONLY}

    def put(self, request, record_id: int):
        require_fields(request.data, ("diagnosis", "prescription"), "Diagnosis and prescription are required")
        record = get_or_404(MedicalRecord, record_id, "Medical record not found")
        s = MedicalRecordUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record.diagnosis = s.validated_data["diagnosis"]
        record.prescription = s.validated_data["prescription"]
        record.save(update_fields=["diagnosis", "prescription"])
        return Response({"message": "Medical record updated successfully!"})

    def delete(self, request, record_id: int):
        get_or_404(MedicalRecord, record_id, "Medical record not found").delete()
        return Response({"message": "Medical record deleted successfully!"})
