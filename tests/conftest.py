from datetime import timedelta
from itertools import count

import pytest
from django.contrib.auth import get_user_model
from django.utils.timezone import now

from okta_login.identity import ExternalIdentity
from okta_login.policy import LoginPolicy
from okta_login.reconciliation import LoginReconciler

PROFILE_FIELDS = ('login', 'firstName', 'lastName', 'department')


@pytest.fixture
def make_policy():
	def _make_policy(**overrides):
		values = {
			'apply_group_restriction': False,
			'profile_fields': PROFILE_FIELDS,
		}
		values.update(overrides)
		if 'site_restricted_groups' in values:
			values['site_restricted_groups'] = frozenset(values['site_restricted_groups'])
		return LoginPolicy(**values)

	return _make_policy


@pytest.fixture
def make_reconciler(make_policy):
	def _make_reconciler(**overrides):
		return LoginReconciler(policy=make_policy(**overrides))

	return _make_reconciler


@pytest.fixture
def make_identity():
	serial = count(1)

	def _make_identity(identifier=None, email=None, groups=('Everyone',), provider='Okta', **profile):
		number = next(serial)
		identifier = identifier or f'00u{number:06d}'
		email = f'user{number}@example.com' if email is None else email
		profile.setdefault('login', email or None)
		profile.setdefault('firstName', 'Jane')
		profile.setdefault('lastName', f'Doe{number}')
		return ExternalIdentity(identifier=identifier, email=email, provider=provider, groups=groups, profile=profile)

	return _make_identity


@pytest.fixture
def make_account(db):
	UserModel = get_user_model()
	serial = count(1)

	def _make_account(email=None, last_sync_days=None, **fields):
		email = email or f'account{next(serial)}@example.com'
		if last_sync_days is not None:
			fields['okta_last_sync'] = now() - timedelta(days=last_sync_days)
		return UserModel.objects.create_user(email, **fields)

	return _make_account
