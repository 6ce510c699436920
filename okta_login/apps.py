"""
Django application configuration for the Okta login.
"""

from logging import getLogger

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _

LOGGER = getLogger(__name__)

class OktaLoginConfig(AppConfig):
	"""
	Configuration class for the 'okta_login' Django application.
	"""

	default_auto_field = 'django.db.models.BigAutoField'
	name = 'okta_login'
	verbose_name = _('Okta login')
