import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from clinic.models import Doctor, Patient, Role, User
from clinic.services import tokens
from clinic.services.passwords import hash_secret


@pytest.fixture(autouse=True)
def _fresh_throttles():
    # throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def as_role():
    """APIClient carrying a bearer token for the given role."""
    def _make(role, identity_id=1):
        c = APIClient()
        c.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens.issue(identity_id, role)}")
        return c
    return _make


@pytest.fixture
def admin_client(as_role):
    return as_role(Role.ADMIN)


@pytest.fixture
def doctor_client(as_role):
    return as_role(Role.DOCTOR, identity_id=2)


@pytest.fixture
def patient_client(as_role):
    return as_role(Role.PATIENT, identity_id=3)


@pytest.fixture
def identity(db):
    return User.objects.create(
        username="alice@example.com",
        email="alice@example.com",
        name="Alice",
        role=Role.DOCTOR,
        password=hash_secret("P@ssw0rd1"),
    )


@pytest.fixture
def patient(db):
    return Patient.objects.create(name="John Doe", email="john@example.com", phone="555-0100", gender="M")


@pytest.fixture
def doctor(db):
    return Doctor.objects.create(name="Grey", specialization="Cardiology", email="grey@example.com", phone="555-0199")
