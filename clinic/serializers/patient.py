from rest_framework import serializers

from clinic.models import Patient


class PatientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = ["patient_id", "name", "email", "phone", "date_of_birth", "gender", "address"]
        read_only_fields = ["patient_id"]
        # uniqueness is enforced by the database and reported as a 409
        extra_kwargs = {"email": {"validators": []}}


class PatientSearchSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
