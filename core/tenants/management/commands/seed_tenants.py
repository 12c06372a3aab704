from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from core.iam.models import TenantMembership
from core.tenants.models import Tenant

DEFAULT_TENANT = {"name": "Default Tenant", "domain": "localhost"}

# (username, email, first, last, role, permissions)
DEFAULT_USERS = [
    ("admin", "admin@example.com", "Admin", "User", TenantMembership.Role.ADMIN, [TenantMembership.WILDCARD]),
    ("user", "user@example.com", "Test", "User", TenantMembership.Role.MEMBER, ["read", "write"]),
]


class Command(BaseCommand):
    help = "Idempotently create a default tenant with an admin and a member account"

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default="password",
            help="Password for newly created users (existing users keep theirs)",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding tenant data...")

        User = get_user_model()

        tenant, created = Tenant.objects.get_or_create(
            domain=DEFAULT_TENANT["domain"],
            defaults={"name": DEFAULT_TENANT["name"]},
        )
        self.stdout.write(f"{'Created' if created else 'Found'} tenant {tenant.name} ({tenant.uuid})")

        for username, email, first_name, last_name, role, permissions in DEFAULT_USERS:
            user, created = User.objects.get_or_create(
                username=username,
                defaults={"email": email, "first_name": first_name, "last_name": last_name},
            )
            if created:
                user.set_password(options["password"])
                user.save(update_fields=["password"])

            TenantMembership.objects.get_or_create(
                tenant=tenant,
                user=user,
                defaults={"role": role, "permissions": permissions, "is_active": True},
            )
            self.stdout.write(f"{email}: {role} of {tenant.name}")

        self.stdout.write(self.style.SUCCESS("Tenant seed complete"))
