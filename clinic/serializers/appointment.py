from rest_framework import serializers

from clinic.models import Appointment, Doctor, Patient


class AppointmentSerializer(serializers.ModelSerializer):
    patient_id = serializers.PrimaryKeyRelatedField(source="patient", queryset=Patient.objects.all())
    doctor_id = serializers.PrimaryKeyRelatedField(source="doctor", queryset=Doctor.objects.all())

    class Meta:
        model = Appointment
        fields = ["appointment_id", "patient_id", "doctor_id", "appointment_date", "reason", "status"]
        read_only_fields = ["appointment_id", "status"]


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=32)


class AppointmentFilterSerializer(serializers.Serializer):
    date = serializers.DateField(required=False, input_formats=["%Y-%m-%d"])
    status = serializers.CharField(required=False, allow_blank=True)
