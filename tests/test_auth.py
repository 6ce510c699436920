import pytest
from django.contrib.auth import SESSION_KEY, authenticate
from django.contrib.auth.models import AnonymousUser
from django.contrib.sessions.middleware import SessionMiddleware
from django.core.exceptions import PermissionDenied

from okta_login.auth_backends import OktaIdentityBackend
from okta_login.exceptions import AccountLockedOut, LoginRejected
from okta_login.lifecycle import ACCOUNT_TOO_OLD_MESSAGE
from okta_login.mixins import OktaLoginMixin
from okta_login.models import FailureCodes, LoginFailure, Passport

pytestmark = pytest.mark.django_db


@pytest.fixture
def http_request(rf):
	request = rf.get('/callback/')
	SessionMiddleware(lambda request: None).process_request(request)
	request.user = AnonymousUser()
	return request


class LoginView(OktaLoginMixin):
	pass


def test_authenticate_identity(settings, make_identity):
	settings.OKTA_LOGIN = {'APPLY_GROUP_RESTRICTION': False}

	user = authenticate(None, identity=make_identity(email='jane@example.com'))

	assert user is not None
	assert user.email == 'jane@example.com'


def test_authenticate_rejection(settings, make_identity):
	settings.OKTA_LOGIN = {'APPLY_GROUP_RESTRICTION': True}

	assert authenticate(None, identity=make_identity(groups=None)) is None
	assert LoginFailure.objects.get().code == FailureCodes.NO_GROUPS


def test_backend_raises_permission_denied(make_policy, make_identity):
	backend = OktaIdentityBackend()
	backend.policy = make_policy()

	with pytest.raises(PermissionDenied) as error:
		backend.authenticate(None, identity=make_identity(email=''))

	assert str(LoginFailure.objects.get().message_id) in str(error.value)


def test_password_login(settings, make_account):
	settings.OKTA_LOGIN = {'LOCKOUT_AFTER_DAYS': 2}
	make_account(email='local@example.com', password='secret')
	make_account(email='stale@example.com', password='secret', last_sync_days=3)

	assert authenticate(None, username='local@example.com', password='secret').email == 'local@example.com'
	assert authenticate(None, username='local@example.com', password='wrong') is None
	assert authenticate(None, username='stale@example.com', password='secret') is None


def test_backend_lockout(make_policy, make_account):
	backend = OktaIdentityBackend()
	backend.policy = make_policy(lockout_after_days=2)

	assert not backend.user_can_authenticate(make_account(last_sync_days=3))
	assert backend.user_can_authenticate(make_account(last_sync_days=1))
	assert backend.user_can_authenticate(make_account())
	assert not backend.user_can_authenticate(make_account(is_active=False))


def test_backend_inactive_account_after_reconcile(make_policy, make_identity, make_account):
	backend = OktaIdentityBackend()
	backend.policy = make_policy(lockout_after_days=2)
	account = make_account(email='jane@example.com', is_active=False)

	assert backend.authenticate(None, identity=make_identity(email='jane@example.com')) is None
	account.refresh_from_db()
	assert account.okta_last_sync is not None


def test_mixin_login(http_request, make_policy, make_identity):
	view = LoginView()
	view.login_policy = make_policy()

	account = view.login_identity(http_request, make_identity(email='jane@example.com'))

	assert http_request.session[SESSION_KEY] == str(account.pk)
	assert http_request.user == account


def test_mixin_login_claims(http_request, make_policy):
	view = LoginView()
	view.login_policy = make_policy(provider_name='Okta-Staff')

	account = view.login_claims(http_request, {'sub': '00u1', 'email': 'jane@example.com', 'given_name': 'Jane'})

	assert account.firstName == 'Jane'
	assert account.get_passport('Okta-Staff').identifier == '00u1'


def test_mixin_rejection(http_request, make_policy, make_identity):
	view = LoginView()
	view.login_policy = make_policy(apply_group_restriction=True, site_restricted_groups={'Staff'})

	with pytest.raises(LoginRejected) as error:
		view.login_identity(http_request, make_identity(groups=('Everyone',)))

	assert error.value.rejection.code == FailureCodes.MISSING_REQUIRED_GROUPS
	assert str(error.value) == error.value.rejection.message
	assert SESSION_KEY not in http_request.session


def test_mixin_lockout_by_passport(http_request, make_policy, make_identity, make_account):
	view = LoginView()
	view.login_policy = make_policy(lockout_after_days=2)
	account = make_account(email='jane@example.com', last_sync_days=3)
	Passport.objects.create_link('00u1', 'Okta', account)
	last_sync = account.okta_last_sync

	with pytest.raises(AccountLockedOut) as error:
		view.login_identity(http_request, make_identity(identifier='00u1', email='jane@example.com'))

	assert str(error.value) == str(ACCOUNT_TOO_OLD_MESSAGE)
	assert SESSION_KEY not in http_request.session
	assert LoginFailure.objects.count() == 0
	account.refresh_from_db()
	assert account.okta_last_sync == last_sync


def test_mixin_lockout_by_email(http_request, make_policy, make_identity, make_account):
	view = LoginView()
	view.login_policy = make_policy(lockout_after_days=2)
	make_account(email='jane@example.com', last_sync_days=3)

	with pytest.raises(AccountLockedOut):
		view.login_identity(http_request, make_identity(email='Jane@example.com'))

	assert not Passport.objects.exists()


def test_mixin_recent_sync_logs_in(http_request, make_policy, make_identity, make_account):
	view = LoginView()
	view.login_policy = make_policy(lockout_after_days=2)
	account = make_account(email='jane@example.com', last_sync_days=1)
	Passport.objects.create_link('00u1', 'Okta', account)

	assert view.login_identity(http_request, make_identity(identifier='00u1', email='jane@example.com')) == account
	assert http_request.session[SESSION_KEY] == str(account.pk)


def test_backend_lockout_before_reconcile(make_policy, make_identity, make_account):
	backend = OktaIdentityBackend()
	backend.policy = make_policy(lockout_after_days=2)
	account = make_account(email='jane@example.com', last_sync_days=3)
	last_sync = account.okta_last_sync

	assert backend.authenticate(None, identity=make_identity(email='jane@example.com')) is None
	account.refresh_from_db()
	assert account.okta_last_sync == last_sync


def test_mixin_inactive_account(http_request, make_policy, make_identity, make_account):
	view = LoginView()
	view.login_policy = make_policy()
	make_account(email='jane@example.com', is_active=False)

	with pytest.raises(AccountLockedOut) as error:
		view.login_identity(http_request, make_identity(email='jane@example.com'))

	assert str(error.value) != str(ACCOUNT_TOO_OLD_MESSAGE)
	assert LoginFailure.objects.count() == 0


def test_mixin_logout(http_request, make_policy, make_identity):
	view = LoginView()
	view.login_policy = make_policy()
	view.login_identity(http_request, make_identity())

	view.logout_user(http_request)

	assert SESSION_KEY not in http_request.session
	with pytest.raises(RuntimeError):
		view.logout_user(http_request)
