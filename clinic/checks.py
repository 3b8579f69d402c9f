from django.conf import settings
from django.core.checks import Tags, Warning, register


@register(Tags.security)
def check_jwt_secret(app_configs, **kwargs):
    if settings.JWT_SECRET == settings.INSECURE_JWT_SECRET:
        return [
            Warning(
                "JWT_SECRET is not set; session tokens are signed with a hardcoded fallback key.",
                hint="Set the JWT_SECRET environment variable to a long random value.",
                id="clinic.W001",
            )
        ]
    return []
