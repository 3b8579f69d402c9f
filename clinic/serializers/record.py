from rest_framework import serializers

from clinic.models import Doctor, MedicalRecord, Patient


class MedicalRecordSerializer(serializers.ModelSerializer):
    patient_id = serializers.PrimaryKeyRelatedField(source="patient", queryset=Patient.objects.all())
    doctor_id = serializers.PrimaryKeyRelatedField(source="doctor", queryset=Doctor.objects.all())

    class Meta:
        model = MedicalRecord
        fields = ["record_id", "patient_id", "doctor_id", "diagnosis", "prescription", "created_at"]
        read_only_fields = ["record_id", "created_at"]


class MedicalRecordUpdateSerializer(serializers.Serializer):
    diagnosis = serializers.CharField()
    prescription = serializers.CharField()
