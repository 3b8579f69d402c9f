from django.core.management.base import BaseCommand

from clinic.models import Role, User
from clinic.services.passwords import hash_secret

DEMO_SET = [
    ("admin@clinic.local", "Demo Admin", Role.ADMIN),
    ("doctor@clinic.local", "Demo Doctor", Role.DOCTOR),
    ("patient@clinic.local", "Demo Patient", Role.PATIENT),
]


class Command(BaseCommand):
    help = "Ensure one demo identity per role exists with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="demo-password", help="password for every demo identity")

    def handle(self, *args, **opts):
        hashed = hash_secret(opts["password"])
        for email, name, role in DEMO_SET:
            u, created = User.objects.get_or_create(
                email=email,
                defaults={"username": email, "name": name, "role": role, "password": hashed, "is_active": True},
            )
            if not created:
                # reset password, role and activation
                u.password = hashed
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role.value})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
