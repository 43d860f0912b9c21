import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "eat_hub_backend.settings")

application = get_wsgi_application()
