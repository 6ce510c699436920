from io import StringIO
from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError

pytestmark = pytest.mark.django_db

UserModel = get_user_model()


def run(command, *args):
	out = StringIO()
	call_command(command, *args, stdout=out)
	return out.getvalue()


def test_unlink_stale_accounts(make_account):
	stale = make_account(last_sync_days=7)
	fresh = make_account(last_sync_days=1)

	output = run('unlink_stale_okta_accounts', '--days', '2')

	assert 'Unlinked 1 stale accounts' in output
	stale.refresh_from_db()
	assert stale.okta_unlinked_when is not None
	assert not stale.is_active
	fresh.refresh_from_db()
	assert fresh.okta_unlinked_when is None


def test_unlink_stale_accounts_dry_run(make_account):
	stale = make_account(last_sync_days=7)

	output = run('unlink_stale_okta_accounts', '--days', '2', '--dry-run')

	assert str(stale) in output
	assert 'nothing changed' in output
	stale.refresh_from_db()
	assert stale.is_active


def test_remove_stale_accounts(make_account):
	make_account(last_sync_days=7)

	assert 'Removed 1 stale accounts' in run('unlink_stale_okta_accounts', '--days', '2', '--remove')
	assert not UserModel.objects.exists()


def test_unlink_stale_accounts_from_settings(settings, make_account):
	settings.OKTA_LOGIN = {'STALE_AFTER_DAYS': 5}
	make_account(last_sync_days=7)
	make_account(last_sync_days=3)

	assert 'Unlinked 1 stale accounts' in run('unlink_stale_okta_accounts')


@pytest.mark.parametrize('args', [(), ('--days', '0')])
def test_unlink_stale_accounts_disabled(args):
	with pytest.raises(CommandError):
		run('unlink_stale_okta_accounts', *args)


@mock.patch('okta_login.management.commands.sync_okta_app_users.OktaAppUserSync')
@mock.patch('okta_login.management.commands.sync_okta_app_users.OktaAPIClient')
def test_sync_app_users(api_client_class, app_sync_class):
	api_client_class.return_value.ping_users_endpoint.return_value = True
	app_sync_class.return_value.run.return_value = (3, 1)

	output = run('sync_okta_app_users', '--app-id', '0oa1', '--no-groups', '--dry-run')

	assert 'Successfully updated 3 accounts' in output
	assert 'Skipped 1' in output
	assert app_sync_class.call_args.kwargs['dry_run']
	app_sync_class.return_value.run.assert_called_once_with(app_id='0oa1', include_groups=False, show_progress=True)


@mock.patch('okta_login.management.commands.sync_okta_app_users.OktaAPIClient')
def test_sync_app_users_without_api(api_client_class):
	api_client_class.return_value.ping_users_endpoint.return_value = False

	with pytest.raises(CommandError):
		run('sync_okta_app_users')


@mock.patch('okta_login.management.commands.sync_okta_app_users.OktaAppUserSync')
@mock.patch('okta_login.management.commands.sync_okta_app_users.OktaAPIClient')
def test_sync_app_users_without_app_id(api_client_class, app_sync_class):
	api_client_class.return_value.ping_users_endpoint.return_value = True
	app_sync_class.return_value.run.side_effect = ValueError('Missing the Okta application ID')

	with pytest.raises(CommandError):
		run('sync_okta_app_users')
