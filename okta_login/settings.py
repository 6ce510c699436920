#python
"""
Okta Login Django settings.
"""

from logging import getLogger

from normalized_django_settings import decode_setting

LOGGER = getLogger(__name__)
MODEL_BACKEND = 'django.contrib.auth.backends.ModelBackend'
OKTA_BACKEND = 'okta_login.auth_backends.OktaIdentityBackend'
TRUE_VALUES = ('1', 'on', 't', 'true', 'y', 'yes')

EXPECTED_VALUES_FROM_ENV = {
	'OKTA_LOGIN_OAUTH_SETTINGS_FROM_ENV': {
		'OKTA_LOGIN_CLIENT_ID',
		'OKTA_LOGIN_CLIENT_SCOPES',
	},
	'OKTA_LOGIN_SETTINGS_FROM_ENV' : {
		'OKTA_LOGIN_API_TOKEN',
		'OKTA_LOGIN_APP_ID',
		'OKTA_LOGIN_APPLY_GROUP_RESTRICTION',
		'OKTA_LOGIN_LINK_EXISTING_ACCOUNT',
		'OKTA_LOGIN_LOCKOUT_AFTER_DAYS',
		'OKTA_LOGIN_ORG_URL',
		'OKTA_LOGIN_PRIVATE_KEY',
		'OKTA_LOGIN_PROFILE_FIELDS',
		'OKTA_LOGIN_PROVIDER_NAME',
		'OKTA_LOGIN_SITE_RESTRICTED_GROUPS',
		'OKTA_LOGIN_STALE_AFTER_DAYS',
	},
}

IMPLICIT_ENVIRONMENTAL_SETTINGS = {
	'OKTA_LOGIN_LOCKOUT_AFTER_DAYS': '0',
	'OKTA_LOGIN_STALE_AFTER_DAYS': '0',
}


def _comma_separated(value):
	return [item.strip() for item in value.split(',') if item.strip()]


def normalized_settings(**django_settings):
	"""Common values for Django
	Applies common Okta login settings to a Django settings dictionary.

	:param django_settings: the current globals() in Django's site
	:type django_settings: Any
	:return: new content for "globals"
	"""

	if 'okta_login' not in django_settings['INSTALLED_APPS']:
		django_settings['INSTALLED_APPS'].append('okta_login')

	if 'AUTH_USER_MODEL' not in django_settings:
		django_settings['AUTH_USER_MODEL'] = 'okta_login.OktaAccount'

	env_settings = django_settings['ENVIRONMENTAL_SETTINGS']
	env_keys = django_settings['ENVIRONMENTAL_SETTINGS_KEYS']

	okta_login = dict(django_settings.get('OKTA_LOGIN', {}))
	for setting_name in ('LINK_EXISTING_ACCOUNT', 'APPLY_GROUP_RESTRICTION'):
		if f'OKTA_LOGIN_{setting_name}' in env_keys:
			okta_login[setting_name] = str(env_settings[f'OKTA_LOGIN_{setting_name}']).strip().lower() in TRUE_VALUES
	for setting_name in ('SITE_RESTRICTED_GROUPS', 'PROFILE_FIELDS'):
		if f'OKTA_LOGIN_{setting_name}' in env_keys:
			okta_login[setting_name] = _comma_separated(env_settings[f'OKTA_LOGIN_{setting_name}'])
	for setting_name in ('LOCKOUT_AFTER_DAYS', 'STALE_AFTER_DAYS'):
		if f'OKTA_LOGIN_{setting_name}' in env_keys:
			okta_login[setting_name] = int(env_settings[f'OKTA_LOGIN_{setting_name}'])
	if 'OKTA_LOGIN_PROVIDER_NAME' in env_keys:
		okta_login['PROVIDER_NAME'] = env_settings['OKTA_LOGIN_PROVIDER_NAME']

	if 'OKTA_LOGIN_ORG_URL' in env_keys:
		okta_api = {'ORG_URL': env_settings['OKTA_LOGIN_ORG_URL']}
		okta_api_client_key = decode_setting(django_settings, 'OKTA_LOGIN_PRIVATE_KEY') if 'OKTA_LOGIN_PRIVATE_KEY' in env_keys else None
		if (okta_api_client_key is not None) and not isinstance(okta_api_client_key, str):
			okta_api_client_key = okta_api_client_key.decode('utf-8')
		if (okta_api_client_key is not None) and (EXPECTED_VALUES_FROM_ENV['OKTA_LOGIN_OAUTH_SETTINGS_FROM_ENV'].issubset(env_keys)):
			okta_api |= {
				'API_CLIENT_ID': env_settings['OKTA_LOGIN_CLIENT_ID'],
				'API_SCOPES': _comma_separated(env_settings['OKTA_LOGIN_CLIENT_SCOPES']),
				'API_PRIVATE_KEY': okta_api_client_key,
			}
		elif 'OKTA_LOGIN_API_TOKEN' in env_keys:
			okta_api['API_TOKEN'] = env_settings['OKTA_LOGIN_API_TOKEN']
		else:
			LOGGER.debug('Missing authentication settings to configure the Okta API client')
			okta_api = None

		if okta_api is not None:
			if 'OKTA_LOGIN_APP_ID' in env_keys:
				okta_api['APP_ID'] = env_settings['OKTA_LOGIN_APP_ID']
			okta_login['API'] = okta_api
	else:
		LOGGER.debug('The Okta API client is not configured')

	django_settings['OKTA_LOGIN'] = okta_login

	# The Okta backend does the ModelBackend work too, with the account age lockout on top
	backends = [backend for backend in django_settings.get('AUTHENTICATION_BACKENDS', []) if backend not in (MODEL_BACKEND, OKTA_BACKEND)]
	django_settings['AUTHENTICATION_BACKENDS'] = [OKTA_BACKEND] + backends

	return django_settings
