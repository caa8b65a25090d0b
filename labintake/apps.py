import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class LabIntakeConfig(AppConfig):
    name = 'labintake'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        if not settings.WEBHOOK_SECRET and not settings.DEBUG:
            logger.warning("WEBHOOK_SECRET is not set, webhook secret check is disabled")
