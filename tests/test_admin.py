import pytest
from django.urls import reverse

from okta_login.models import FailureCodes, LoginFailure, Passport

pytestmark = pytest.mark.django_db

CHANGELIST = 'admin:okta_login_oktaaccount_changelist'


def test_account_changelist(admin_client, make_account):
	make_account(email='jane@example.com', last_sync_days=1)

	response = admin_client.get(reverse(CHANGELIST))

	assert response.status_code == 200
	assert b'jane@example.com' in response.content


def test_clear_last_sync_action(admin_client, make_account):
	account = make_account(last_sync_days=1)

	response = admin_client.post(reverse(CHANGELIST), {'action': 'clear_last_sync', '_selected_action': [account.pk]})

	assert response.status_code == 302
	account.refresh_from_db()
	assert account.okta_last_sync is None


def test_unlink_action(admin_client, make_account):
	account = make_account(last_sync_days=1)
	Passport.objects.create_link('00u1', 'Okta', account)

	admin_client.post(reverse(CHANGELIST), {'action': 'unlink_from_okta', '_selected_action': [account.pk]})

	account.refresh_from_db()
	assert account.okta_unlinked_when is not None
	assert not account.is_active
	assert not Passport.objects.exists()


def test_login_failures_are_read_only(admin_client):
	failure = LoginFailure.objects.create(code=FailureCodes.MISSING_EMAIL, message_id=123456)

	assert admin_client.get(reverse('admin:okta_login_loginfailure_changelist'), {'q': '123456'}).status_code == 200
	assert admin_client.get(reverse('admin:okta_login_loginfailure_add')).status_code == 403
	assert admin_client.post(reverse('admin:okta_login_loginfailure_delete', args=[failure.pk]), {'post': 'yes'}).status_code == 403
	assert LoginFailure.objects.filter(pk=failure.pk).exists()
