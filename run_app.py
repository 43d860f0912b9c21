import os
import sys

import django
from django.conf import settings
from django.core.management import call_command, execute_from_command_line

if __name__ == "__main__":
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "eat_hub_backend.settings")

    # any arguments are handed to manage.py-style commands, e.g. `run_app.py seed_menu`
    if len(sys.argv) > 1:
        execute_from_command_line(sys.argv)
        sys.exit(0)

    django.setup()
    call_command("migrate", run_syncdb=True, interactive=False, verbosity=0)

    if settings.METRICS_LOG_INTERVAL_MINUTES > 0:
        from monitoring.monitor import monitor, MetricsLogger
        MetricsLogger(monitor, settings.METRICS_LOG_INTERVAL_MINUTES).start()

    execute_from_command_line([sys.argv[0], "runserver", "0.0.0.0:8000", "--noreload"])
