"""
Okta API access, for the application user sync.
"""

from logging import getLogger

from asgiref.sync import async_to_sync
from okta.client import Client as OktaClient
from okta.exceptions.exceptions import OktaAPIException

from .policy import LoginPolicy

ERROR_CODE_MAP = {
	'USER_NOT_FOUND' : 'E0000007',
}
LOGGER = getLogger(__name__)


class OktaAPIClient:
	"""
	Handles interactions with the Okta API, including lazy instantiation of the Okta SDK client and paging.
	"""

	STATIC_CONFIG = {'raiseException': True}

	def __init__(self, api_settings=None):
		"""Init
		The API settings default to the "API" section of the OKTA_LOGIN settings.

		:param api_settings: ORG_URL plus either API_TOKEN or API_CLIENT_ID/API_PRIVATE_KEY/API_SCOPES
		:type api_settings: dict|None
		"""

		self.api_settings = LoginPolicy.from_settings().api if api_settings is None else api_settings

	def __getattr__(self, name):
		"""Lazy instantiation
		It provides a mechanism for lazy instantiation of the Okta SDK client and its credentials.

		:param name: The name of the attribute being accessed.
		:type name: str
		:returns: the attribute value
		"""

		if name == 'okta_api_client':
			if 'ORG_URL' not in self.api_settings:
				raise RuntimeError('Missing ORG_URL for Okta client')
			client_config = {'orgUrl': self.api_settings['ORG_URL']} | self.okta_api_credentials
			value = OktaClient(client_config | self.STATIC_CONFIG)
		elif name == 'okta_api_credentials':
			if ('API_CLIENT_ID' in self.api_settings) and ('API_PRIVATE_KEY' in self.api_settings):
				value = {
					'authorizationMode'	: 'PrivateKey',
					'clientId'			: self.api_settings['API_CLIENT_ID'],
					'privateKey'		: self.api_settings['API_PRIVATE_KEY'],
					'scopes'			: self.api_settings.get('API_SCOPES', None),
				}
			elif 'API_TOKEN' in self.api_settings:
				value = {'token': self.api_settings['API_TOKEN']}
			else:
				raise RuntimeError('Missing auth settings for Okta client')
		else:
			return getattr(super(), name)
		self.__setattr__(name, value)
		return value

	@staticmethod
	def _unpack(sdk_result):
		"""SDK result
		The SDK methods return either (result, response, error) or (response, error); this turns both into (result, response), raising the error if any.

		:param sdk_result: what the SDK method returned
		:type sdk_result: tuple
		:return: the result (None for the two items flavor) and the response
		:rtype: tuple
		"""

		if len(sdk_result) == 3:
			result, response, error = sdk_result
		elif len(sdk_result) == 2:
			result, (response, error) = None, sdk_result
		else:
			raise RuntimeError('Unexpected Okta SDK result: {}'.format(sdk_result))

		if error is not None:
			raise RuntimeError(error)
		return result, response

	def __call__(self, method_name, *args, retrieve_all_pages=True, **kwargs):
		"""Call the Okta API
		Runs the (async) SDK method synchronously. List results are extended with the following pages unless "retrieve_all_pages" is off.

		:param method_name: the SDK client method, like "list_application_users"
		:type method_name: str
		:param args: passed as is to the SDK method
		:param retrieve_all_pages: follow the pagination
		:type retrieve_all_pages: bool
		:param kwargs: passed as is to the SDK method
		:return: the SDK result
		"""

		result, response = self._unpack(async_to_sync(getattr(self.okta_api_client, method_name))(*args, **kwargs))
		if result is None:
			return response

		while retrieve_all_pages and (response is not None) and response.has_next():
			page, error = async_to_sync(response.next)()
			if error is not None:
				raise RuntimeError(error)
			result.extend(page)

		return result

	@property
	def app_id(self):
		"""The Okta application ID, from the API settings"""

		return self.api_settings.get('APP_ID')

	def get_user(self, user_id):
		"""Get user
		Fetches the user (with its whole profile) by ID or login.

		:param user_id: the Okta ID or login of the user
		:type user_id: str
		:return: the matching user or None
		:rtype: okta.models.User|None
		"""

		try:
			return self('get_user', user_id)
		except OktaAPIException as error_:
			if error_.args[0]['errorCode'] != ERROR_CODE_MAP['USER_NOT_FOUND']:
				LOGGER.exception('Unknown error occurred when retrieving Okta user: %s', user_id)

		return None

	def list_application_users(self, app_id, **kwargs):
		"""List application users
		The users assigned to the application. Errors are reported via logging and result in an empty list.

		:param app_id: the application ID
		:type app_id: str
		:param kwargs: query parameters passed as is to "list_application_users"
		:type kwargs: any
		:return: the application users
		:rtype: list[okta.models.AppUser]
		"""

		try:
			return self('list_application_users', app_id, query_params=kwargs)
		except OktaAPIException:
			LOGGER.exception('Unknown error occurred when retrieving the users of Okta application: %s', app_id)

		return []

	def list_user_group_names(self, user_id):
		"""List user groups
		Names of the groups of which the user is a member.

		:param user_id: the Okta ID of the user
		:type user_id: str
		:return: the group names, None if they couldn't be retrieved
		:rtype: list[str]|None
		"""

		try:
			return [group.profile.name for group in self('list_user_groups', user_id)]
		except OktaAPIException as error_:
			if error_.args[0]['errorCode'] != ERROR_CODE_MAP['USER_NOT_FOUND']:
				LOGGER.exception("Unknown error occurred when retrieving Okta user's groups: %s", user_id)

		return None

	def ping_users_endpoint(self):
		"""Ping users endpoint
		Attempt a query to the users endpoint and report availability.

		:return: True if the query succeeds.
		:rtype: bool
		"""

		try:
			return len(self('list_users', retrieve_all_pages=False, query_params={'limit':'1'})) > 0
		except Exception:
			LOGGER.debug('The Okta users endpoint is not available', exc_info=True)
			return False
