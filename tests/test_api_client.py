from types import SimpleNamespace
from unittest import mock

import pytest
from okta.exceptions.exceptions import OktaAPIException

from okta_login.api_client import OktaAPIClient


def not_found():
	return OktaAPIException({'errorCode': 'E0000007', 'errorSummary': 'Not found'})


class Response:

	def __init__(self, *pages):
		self.pages = list(pages)

	def has_next(self):
		return bool(self.pages)

	async def next(self):
		return self.pages.pop(0), None


@pytest.fixture
def sdk_client():
	client = OktaAPIClient({'ORG_URL': 'https://example.okta.com', 'API_TOKEN': 'token', 'APP_ID': '0oa1'})
	client.okta_api_client = mock.Mock()
	return client


def test_token_credentials():
	client = OktaAPIClient({'ORG_URL': 'https://example.okta.com', 'API_TOKEN': 'token'})

	assert client.okta_api_credentials == {'token': 'token'}
	assert client.app_id is None


def test_private_key_credentials():
	client = OktaAPIClient({'ORG_URL': 'https://example.okta.com', 'API_CLIENT_ID': 'client', 'API_PRIVATE_KEY': 'key', 'API_SCOPES': ['okta.users.read']})

	assert client.okta_api_credentials['authorizationMode'] == 'PrivateKey'
	assert client.okta_api_credentials['scopes'] == ['okta.users.read']


@pytest.mark.parametrize('api_settings', [{}, {'ORG_URL': 'https://example.okta.com'}])
def test_missing_settings(api_settings):
	with pytest.raises(RuntimeError):
		OktaAPIClient(api_settings).okta_api_client


def test_paging(sdk_client):
	sdk_client.okta_api_client.list_application_users = mock.AsyncMock(return_value=(['a'], Response(['b'], ['c']), None))

	assert sdk_client.list_application_users('0oa1') == ['a', 'b', 'c']
	sdk_client.okta_api_client.list_application_users.assert_awaited_once_with('0oa1', query_params={})


def test_get_user_not_found(sdk_client):
	sdk_client.okta_api_client.get_user = mock.AsyncMock(side_effect=not_found())

	assert sdk_client.get_user('00u1') is None


def test_user_group_names(sdk_client):
	groups = [SimpleNamespace(profile=SimpleNamespace(name=name)) for name in ('Everyone', 'Editors')]
	sdk_client.okta_api_client.list_user_groups = mock.AsyncMock(return_value=(groups, None, None))

	assert sdk_client.list_user_group_names('00u1') == ['Everyone', 'Editors']


def test_user_group_names_error(sdk_client):
	sdk_client.okta_api_client.list_user_groups = mock.AsyncMock(side_effect=not_found())

	assert sdk_client.list_user_group_names('00u1') is None


def test_api_error(sdk_client):
	sdk_client.okta_api_client.list_users = mock.AsyncMock(return_value=(None, None, 'bad request'))

	assert not sdk_client.ping_users_endpoint()
