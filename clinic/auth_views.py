"""
Registration, login and token validation endpoints.

Kept out of ``clinic.views`` so that the authentication class can be
imported by DRF at startup without importing any view module.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from clinic.exceptions import require_fields
from clinic.permissions import IsAuthenticatedPrincipal
from clinic.serializers.auth import LoginSerializer, RegisterSerializer
from clinic.services.accounts import authenticate_identity, register_identity


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def register_view(request):
    require_fields(request.data, ("name", "email", "password"))
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    register_identity(name=vd["name"], email=vd["email"], secret=vd["password"], role=vd.get("role"))
    return Response({"message": "User registered successfully!"}, status=status.HTTP_201_CREATED)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    """Exchange email and password for a session token."""
    require_fields(request.data, ("email", "password"))
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    result = authenticate_identity(email=vd["email"], secret=vd["password"])
    return Response({
        "message": "Login successful",
        "token": result.token,
        "expires_in": result.expires_in,
    })


# ScopedRateThrottle reads throttle_scope from the view instance
login_view.cls.throttle_scope = "login"


@api_view(["GET"])
@permission_classes([IsAuthenticatedPrincipal])
def token_validate_view(request):
    claims = request.auth
    return Response({
        "message": "Token is valid",
        "user": {"userId": claims.identity_id, "role": claims.role.value},
    })
