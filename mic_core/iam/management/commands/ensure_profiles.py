# mic_core/iam/management/commands/ensure_profiles.py

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from mic_core.common.permissions import ROLE_MEDEWERKER, ROLE_SUPER_ADMIN
from mic_core.iam.models import UserProfile


class Command(BaseCommand):
    help = "Ensure every auth user has a profile (idempotent). Optionally promote users to super_admin."

    def add_arguments(self, parser):
        parser.add_argument(
            "--promote",
            action="append",
            default=[],
            metavar="EMAIL",
            help="E-mail of a user to promote to super_admin (repeatable).",
        )

    def handle(self, *args, **options):
        User = get_user_model()

        created = 0
        for user in User.objects.filter(mic_profile__isnull=True).iterator():
            UserProfile.objects.create(user=user, email=user.email or None, role=ROLE_MEDEWERKER)
            created += 1

        promoted = 0
        for email in options["promote"]:
            profile = UserProfile.objects.filter(user__email__iexact=email.strip()).first()
            if profile is None:
                raise CommandError(f"No user with e-mail {email}")
            if profile.role != ROLE_SUPER_ADMIN:
                profile.role = ROLE_SUPER_ADMIN
                profile.save(update_fields=["role", "updated_at"])
                promoted += 1

        self.stdout.write(self.style.SUCCESS(f"Profiles ensured. Newly created: {created}, promoted: {promoted}"))
