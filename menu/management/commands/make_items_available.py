from django.core.management.base import BaseCommand

from menu.models import MenuItem


class Command(BaseCommand):
    help = "Mark every unavailable menu item as available."

    def handle(self, *args, **opts):
        hidden = list(MenuItem.objects.filter(available=False).values_list("name", flat=True))
        MenuItem.objects.filter(available=False).update(available=True)
        self.stdout.write(self.style.SUCCESS(f"Updated {len(hidden)} items to available"))
        for name in hidden:
            self.stdout.write(f"- {name}")
