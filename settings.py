#!python
"""Configuration module for standalone django-okta-login
Configuration parameters for a test deployment of django-okta-login.
"""

from pathlib import Path

from normalized_django_settings import normalize_settings

SITE_DIR = Path(__file__).parent

settings_module_names = (
	'normalized_django_settings.settings',
	'okta_login.settings',
)
global_state = globals()
global_state |= normalize_settings(*settings_module_names, django_settings=globals())
