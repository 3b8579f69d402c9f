"""
Appointment endpoints.

Scheduling an appointment pushes a NEW_APPOINTMENT event to every
connected listener once the row is saved.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from clinic.exceptions import require_fields
from clinic.models import Appointment
from clinic.permissions import ADMIN_ONLY, STAFF_ROLES, RoleGatedAPIView, allow_roles
from clinic.realtime.broadcaster import EVENT_NEW_APPOINTMENT, BroadcastEvent, broadcaster
from clinic.serializers.appointment import (
    AppointmentFilterSerializer,
    AppointmentSerializer,
    AppointmentStatusSerializer,
)
from clinic.views.common import get_or_404

logger = logging.getLogger(__name__)


def new_appointment_event(data: dict) -> BroadcastEvent:
    return BroadcastEvent(
        type=EVENT_NEW_APPOINTMENT,
        message=(
            f"New appointment scheduled for Patient {data['patient_id']} "
            f"with Doctor {data['doctor_id']} on {data['appointment_date']}"
        ),
        data=dict(data),
    )


def _announce(data: dict) -> None:
    try:
        broadcaster.broadcast_sync(new_appointment_event(data))
    except Exception:
        # the appointment is already saved; listeners just miss this event
        logger.exception("Failed to broadcast appointment %s", data.get("appointment_id"))


@api_view(["GET", "POST"])
@permission_classes([allow_roles(*STAFF_ROLES)])
def appointments(request):
    if request.method == "POST":
        require_fields(request.data, ("patient_id", "doctor_id", "appointment_date", "reason"))
        s = AppointmentSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        appointment = s.save(status=Appointment.STATUS_SCHEDULED)
        _announce(s.data)
        return Response(
            {"message": "Appointment scheduled successfully!", "appointment_id": appointment.appointment_id},
            status=status.HTTP_201_CREATED,
        )
    qs = Appointment.objects.order_by("appointment_id")
    return Response(AppointmentSerializer(qs, many=True).data)


@api_view(["GET"])
@permission_classes([allow_roles(*STAFF_ROLES)])
def filter_appointments(request):
    """Appointments on a calendar day (``date=YYYY-MM-DD``) and/or with a status."""
    q = AppointmentFilterSerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Appointment.objects.order_by("appointment_date", "appointment_id")
    day = q.validated_data.get("date")
    if day:
        qs = qs.filter(appointment_date__date=day)
    state = q.validated_data.get("status")
    if state:
        qs = qs.filter(status=state)
    return Response(AppointmentSerializer(qs, many=True).data)


class AppointmentDetail(RoleGatedAPIView):
    allowed_roles = {"PUT": STAFF_ROLES, "DELETE": ADMIN_ONLY}

    def put(self, request, appointment_id: int):
        require_fields(request.data, ("status",), "Status is required")
        appointment = get_or_404(Appointment, appointment_id, "Appointment not found")
        s = AppointmentStatusSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        appointment.status = s.validated_data["status"]
        appointment.save(update_fields=["status"])
        return Response({"message": "Appointment status updated successfully!"})

    def delete(self, request, appointment_id: int):
        get_or_404(Appointment, appointment_id, "Appointment not found!").delete()
        return Response({"message": "Appointment deleted successfully!"})
