#python
"""
Okta authentication backend for Django.
"""

from logging import getLogger

from django.contrib.auth.backends import ModelBackend
from django.core.exceptions import PermissionDenied

from .lifecycle import can_log_in
from .policy import LoginPolicy
from .reconciliation import LoginReconciler, Rejection

LOGGER = getLogger(__name__)


class OktaIdentityBackend(ModelBackend):
	"""Okta auth backend
	Authenticates already verified Okta identities, reconciling them with the local accounts. Use it with "authenticate(request, identity=...)".
	"""

	def __getattr__(self, name):
		"""Lazy instantiation
		It provides a mechanism for lazy instantiation of the login policy and the reconciler.

		:param name: The name of the attribute being accessed.
		:type name: str
		:returns: the attribute value
		"""

		if name == 'policy':
			value = LoginPolicy.from_settings()
		elif name == 'reconciler':
			value = LoginReconciler(policy=self.policy)
		else:
			return getattr(super(), name)
		self.__setattr__(name, value)
		return value

	def authenticate(self, request, identity=None, username=None, password=None, **kwargs):
		"""Authenticate identity
		Runs the reconciliation for the identity. A rejection stops the authentication right there (other backends are not tried) by raising PermissionDenied with the support message. Without an identity it falls back to the regular username/password authentication, so the account age lockout covers local passwords too. For an identity, the age lockout is checked against the existing account before the reconciliation refreshes its last sync.

		:param request: the request object, unused so far
		:type request: DjangoHTTPRequest
		:param identity: the verified identity
		:type identity: okta_login.identity.ExternalIdentity
		:param username: the local username, when there is no identity
		:type username: str|None
		:param password: the local password, when there is no identity
		:type password: str|None
		:return: the authenticated user or None
		:rtype: UserModel|None
		:raises PermissionDenied: if the reconciliation was rejected
		"""

		if identity is None:
			return super().authenticate(request, username=username, password=password, **kwargs)

		account = self.reconciler.find_existing_account(identity)
		if (account is not None) and not can_log_in(account, self.policy.lockout_after_days):
			LOGGER.info('Okta account locked out: %s', account)
			return None

		result = self.reconciler.reconcile(identity)
		if isinstance(result, Rejection):
			raise PermissionDenied(result.message)

		if not self.user_can_authenticate(result):
			LOGGER.info("Okta account can't log in: %s", result)
			return None
		return result

	def user_can_authenticate(self, user):
		"""Returns whether the user is allowed to authenticate
		On top of the "is_active" check, accounts not synchronized from Okta for too long are locked out.

		:param user: the user to check for
		:type user: UserModel
		:return: True if the user can log in
		:rtype: bool
		"""

		return super().user_can_authenticate(user) and can_log_in(user, self.policy.lockout_after_days)
