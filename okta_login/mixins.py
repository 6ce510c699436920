#python
"""
Mixins for Django Okta Login.
"""

from logging import getLogger

from django.contrib.auth import login, logout

from .audit import support_message
from .exceptions import AccountLockedOut, LoginRejected
from .identity import ExternalIdentity
from .lifecycle import ACCOUNT_TOO_OLD_MESSAGE, can_log_in
from .policy import LoginPolicy
from .reconciliation import LoginReconciler, Rejection

BACKEND_PATH = 'okta_login.auth_backends.OktaIdentityBackend'
LOGGER = getLogger(__name__)


class OktaLoginMixin:
	"""
	Logs users in from Okta identities. The view does the OAuth/OIDC part and calls "login_identity" (or "login_claims") with the verified result.
	"""

	login_policy = None

	def get_login_policy(self):
		"""Login policy
		The "login_policy" attribute or the one from the Django settings.
		"""

		if self.login_policy is None:
			return LoginPolicy.from_settings()
		return self.login_policy

	def login_claims(self, request, claims, provider_name=None):
		"""Login from claims
		Convenience wrapper around "login_identity" for the verified OIDC claims.

		:param request: the Django request
		:type request: object
		:param claims: the verified claims (ID token or userinfo)
		:type claims: dict
		:param provider_name: the provider name, defaults to the policy's
		:type provider_name: str|None
		:return: the logged in account
		:rtype: UserModel
		"""

		policy = self.get_login_policy()
		identity = ExternalIdentity.from_claims(claims, provider_name or policy.provider_name)
		return self.login_identity(request, identity)

	def login_identity(self, request, identity):
		"""Login identity
		Checks that the existing account (if any) is not too old, reconciles the identity, checks that the account is active and logs it in. The age check uses the last sync from before this login, since the reconciliation refreshes it.

		:param request: the Django request
		:type request: object
		:param identity: the verified identity
		:type identity: okta_login.identity.ExternalIdentity
		:return: the logged in account
		:rtype: UserModel
		:raises LoginRejected: if the reconciliation was rejected
		:raises AccountLockedOut: if the account is inactive or too old
		"""

		policy = self.get_login_policy()
		reconciler = LoginReconciler(policy=policy)
		account = reconciler.find_existing_account(identity)
		if (account is not None) and not can_log_in(account, policy.lockout_after_days):
			LOGGER.info('Okta account locked out: %s', account)
			raise AccountLockedOut(str(ACCOUNT_TOO_OLD_MESSAGE))

		result = reconciler.reconcile(identity)
		if isinstance(result, Rejection):
			raise LoginRejected(result)

		if not result.is_active:
			LOGGER.info('Okta account is inactive: %s', result)
			raise AccountLockedOut(support_message())

		LOGGER.info('Logging in "%s"', result)
		login(request, result, backend=BACKEND_PATH)
		return result

	def logout_user(self, request):
		"""Logs out the current user.

		:param request: The Django request object.
		:type request: object
		:raises RuntimeError: If the user is not authenticated.
		"""

		if request.user.is_authenticated:
			LOGGER.info('Logging out user: %s', request.user)
			logout(request)
		else:
			raise RuntimeError('User is not authenticated')
