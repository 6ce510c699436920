from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.utils.timezone import now

from okta_login.lifecycle import can_log_in, find_stale_accounts, stale_threshold, unlink_account, unlink_stale_accounts
from okta_login.models import Passport
from okta_login.signals import okta_account_unlinked

pytestmark = pytest.mark.django_db

UserModel = get_user_model()


def test_stale_scan(make_account):
	never_synced = make_account()
	recent = make_account(last_sync_days=1)
	three_days = make_account(last_sync_days=3)
	seven_days = make_account(last_sync_days=7)

	stale = UserModel.objects.stale(stale_threshold(2))

	assert set(stale) == {three_days, seven_days}
	assert never_synced not in stale
	assert recent not in stale


def test_stale_scan_excludes_unlinked(make_account):
	make_account(last_sync_days=7, okta_unlinked_when=now())
	linked = make_account(last_sync_days=7)

	assert list(find_stale_accounts(2)) == [linked]


def test_stale_scan_is_strict(make_account):
	current = now()
	account = make_account(okta_last_sync=current - timedelta(days=2))

	assert not find_stale_accounts(2, now=current).exists()
	assert list(find_stale_accounts(2, now=current + timedelta(seconds=1))) == [account]


@pytest.mark.parametrize('days', [0, -1])
def test_stale_scan_disabled(make_account, days):
	make_account(last_sync_days=30)

	assert not find_stale_accounts(days).exists()


def test_lockout_gate(make_account):
	assert not can_log_in(make_account(last_sync_days=3), 2)
	assert can_log_in(make_account(last_sync_days=1), 2)
	never_synced = make_account()
	for days in (-1, 0, 2, 365):
		assert can_log_in(never_synced, days)


def test_lockout_gate_disabled(make_account):
	account = make_account(last_sync_days=300)

	assert can_log_in(account, 0)
	assert can_log_in(account, -5)


def test_lockout_gate_boundary(make_account):
	current = now()
	account = make_account(okta_last_sync=current - timedelta(days=2))

	assert can_log_in(account, 2, now=current)
	assert not can_log_in(account, 2, now=current + timedelta(seconds=1))


def test_unlink_account(make_account):
	account = make_account(last_sync_days=10)
	Passport.objects.create_link('00u1', 'Okta', account)
	unlinked = []
	handler = lambda sender, **kwargs: unlinked.append((kwargs['account'], kwargs['removed']))
	okta_account_unlinked.connect(handler)
	try:
		unlink_account(account)
	finally:
		okta_account_unlinked.disconnect(handler)

	account.refresh_from_db()
	assert account.is_unlinked
	assert not account.is_active
	assert account.okta_last_sync is not None
	assert not Passport.objects.exists()
	assert unlinked == [(account, False)]


def test_remove_account(make_account):
	account = make_account(last_sync_days=10)
	Passport.objects.create_link('00u1', 'Okta', account)

	unlink_account(account, remove=True)

	assert not UserModel.objects.exists()
	assert not Passport.objects.exists()


def test_unlink_stale_accounts(make_account):
	stale = make_account(last_sync_days=10)
	fresh = make_account(last_sync_days=1)

	assert unlink_stale_accounts(5, dry_run=True) == [stale]
	stale.refresh_from_db()
	assert not stale.is_unlinked

	assert unlink_stale_accounts(5) == [stale]
	stale.refresh_from_db()
	fresh.refresh_from_db()
	assert stale.is_unlinked
	assert not fresh.is_unlinked
	assert unlink_stale_accounts(5) == []


def test_clear_last_sync(make_account):
	account = make_account(last_sync_days=10)

	account.clear_last_sync()

	account.refresh_from_db()
	assert account.okta_last_sync is None
	assert account in UserModel.objects.never_synced()
	assert can_log_in(account, 1)
