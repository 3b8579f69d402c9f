from rest_framework import serializers

from clinic.models import Doctor


class DoctorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Doctor
        fields = ["doctor_id", "name", "specialization", "email", "phone"]
        read_only_fields = ["doctor_id"]
        extra_kwargs = {"email": {"validators": []}}


class DoctorSearchSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    specialization = serializers.CharField(required=False, allow_blank=True)
