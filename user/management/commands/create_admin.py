from django.core.management.base import BaseCommand, CommandError

from user.models import User
from token_decorators import ADMIN


class Command(BaseCommand):
    help = "Create an admin account, or reset its password when it already exists."

    def add_arguments(self, parser):
        parser.add_argument("--email", required=True)
        parser.add_argument("--password", required=True)
        parser.add_argument("--username", help="Defaults to the part of the email before '@'.")

    def handle(self, *args, **opts):
        email = opts["email"].strip().lower()
        if "@" not in email:
            raise CommandError("--email must be an email address")
        if len(opts["password"]) < 6:
            raise CommandError("--password must be at least 6 characters")

        username = opts.get("username") or email.split("@")[0]
        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            user = User(email=email, username=username, usertype=ADMIN)
            user.set_password(opts["password"])
            user.save()
            self.stdout.write(self.style.SUCCESS(f"Admin {email} created."))
            return

        user.set_password(opts["password"])
        user.usertype = ADMIN
        user.username = username
        user.save()
        self.stdout.write(self.style.SUCCESS(f"Admin {email} updated."))
