from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction

from users.models import UserProfile

SAMPLE_USERS = [
    {
        "name": "John Doe",
        "email": "john@example.com",
        "bio": "Event organizer and community enthusiast. Love bringing people together!",
        "avatar": "https://i.pravatar.cc/150?img=12",
    },
    {
        "name": "Maria Santos",
        "email": "maria@example.com",
        "bio": "Music lover and food festival goer. Always looking for the next great event!",
        "avatar": "https://i.pravatar.cc/150?img=47",
    },
    {
        "name": "Alex Rodriguez",
        "email": "alex@example.com",
        "bio": "Sports enthusiast and tech geek. Organizing community events since 2020.",
        "avatar": "https://i.pravatar.cc/150?img=33",
    },
]


class Command(BaseCommand):
    help = "Create the sample user accounts (password: password123)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete the sample accounts first and recreate them",
        )
        parser.add_argument(
            "--password",
            default="password123",
            help="Password given to every sample account",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        emails = [u["email"] for u in SAMPLE_USERS]

        if options["reset"]:
            deleted, _ = User.objects.filter(email__in=emails).delete()
            self.stdout.write(self.style.WARNING(f"Removed {deleted} existing row(s)"))

        created_count = 0
        for idx, sample in enumerate(SAMPLE_USERS, 1):
            user, created = User.objects.get_or_create(
                username=sample["email"],
                defaults={"email": sample["email"]},
            )
            if created:
                user.set_password(options["password"])
                user.save(update_fields=["password"])
                created_count += 1

            profile, _ = UserProfile.objects.get_or_create(user=user)
            profile.full_name = sample["name"]
            profile.bio = sample["bio"]
            profile.avatar = sample["avatar"]
            profile.save()

            status = "created" if created else "exists"
            self.stdout.write(f"{idx}. {sample['name']} - {sample['email']} ({status})")

        self.stdout.write(self.style.SUCCESS(f"Seeded {created_count} new user(s)"))
