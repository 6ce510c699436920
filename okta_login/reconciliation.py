#python
"""Login reconciliation
Maps a verified Okta identity to a local account, on every login. The decision goes like this:
1. the group restriction (if enabled)
2. the identity must have an email and a provider name
3. the passport for (identifier, provider) is looked up:
	- none: the account is resolved by email (created, linked or refused) and a passport is created for it
	- one pointing to a deleted account: the account is resolved again and the passport repointed
	- one pointing to a live account: that's the account
4. the cached profile and the last sync are refreshed and the Okta groups assigned

Any failure ends in a Rejection (with an audit record) instead of an account. Nothing raised, nothing stored between attempts.
"""

from dataclasses import dataclass
from enum import Enum
from logging import getLogger

from django.contrib.auth import get_user_model
from django.db import transaction

from .audit import record_login_failure, support_message
from .groups import assign_okta_groups
from .models import FailureCodes, Passport
from .policy import LoginPolicy
from .signals import okta_account_created, okta_login_rejected, send_and_report

LOGGER = getLogger(__name__)


class ReconcileStates(Enum):
	"""States of a login reconciliation"""

	START = 'start'
	IDENTITY_VERIFIED = 'identity verified'
	GROUP_CHECKED = 'group checked'
	PASSPORT_RESOLVED = 'passport resolved'
	ACCOUNT_RESOLVED = 'account resolved'
	GROUPS_ASSIGNED = 'groups assigned'
	DONE = 'done'
	REJECTED = 'rejected'


class GroupRestriction(Enum):
	"""Outcome of the group restriction check
	"Not applicable" (restriction disabled) is not the same as "passed".
	"""

	NOT_APPLICABLE = 'not applicable'
	PASSED = 'passed'
	NO_GROUPS = 'no groups'
	MISSING_REQUIRED_GROUPS = 'missing required groups'

	@property
	def failure_code(self):
		"""The matching failure code, None if it's not a failure"""

		return {
			GroupRestriction.NO_GROUPS: FailureCodes.NO_GROUPS,
			GroupRestriction.MISSING_REQUIRED_GROUPS: FailureCodes.MISSING_REQUIRED_GROUPS,
		}.get(self)


@dataclass(frozen=True)
class Rejection:
	"""Rejected login
	What the caller gets instead of an account. Only "message" should reach the user.
	"""

	code: FailureCodes
	message_id: int
	rejected_at: ReconcileStates
	provider: str = ''
	user_identifier: str = ''

	state = ReconcileStates.REJECTED

	def __str__(self):
		return self.message

	@property
	def message(self):
		"""The generic support message with the message ID"""

		return support_message(self.message_id)


@dataclass(frozen=True)
class Resolution:
	"""Account resolution result
	Either an account (maybe just created) or the failure code explaining why there's none.
	"""

	account: object = None
	failure: FailureCodes = None
	created: bool = False

	@property
	def ok(self):
		return self.account is not None


class LoginReconciler:
	"""Login reconciler
	Runs the reconciliation of Okta identities with local accounts. The instance only holds the policy, so it can be reused across requests.
	"""

	def __init__(self, policy=None):
		"""Init
		Uses the policy from the Django settings when none is provided.

		:param policy: the login policy
		:type policy: LoginPolicy|None
		"""

		self.policy = LoginPolicy.from_settings() if policy is None else policy

	def _account_for_passport(self, passport, identity, provider_name):
		"""Account for the passport
		The passport branch of the reconciliation. Must run inside a transaction.

		:return: the resolution
		:rtype: Resolution
		"""

		if passport is None:
			resolution = self.resolve_account(identity, provider_name)
			if not resolution.ok:
				return Resolution(failure=resolution.failure or FailureCodes.NO_PASSPORT_NO_ACCOUNT_CREATED)
			if Passport.objects.create_link(identity.identifier, provider_name, resolution.account) is None:
				return Resolution(failure=FailureCodes.CREATE_IDENT_COLLISION)
			self._relink(resolution.account)
			return resolution

		if passport.account is None:
			LOGGER.debug('The account of passport %s is gone, resolving a new one', passport)
			resolution = self.resolve_account(identity, provider_name)
			if not resolution.ok:
				return Resolution(failure=resolution.failure or FailureCodes.PASSPORT_NO_ACCOUNT_CREATED)
			Passport.objects.repoint(passport, resolution.account)
			self._relink(resolution.account)
			return resolution

		return Resolution(account=passport.account)

	@staticmethod
	def _relink(account):
		"""Account linked again
		An account getting a passport is not unlinked anymore.
		"""

		if account.okta_unlinked_when is not None:
			LOGGER.info('Account linked with Okta again: %s', account)
			account.okta_unlinked_when = None
			account.save(update_fields=['okta_unlinked_when'])

	def check_group_restriction(self, identity):
		"""Group restriction
		The identity must come with groups, and include every one of the site restricted groups (if any).

		:param identity: the identity
		:type identity: okta_login.identity.ExternalIdentity
		:return: the outcome
		:rtype: GroupRestriction
		"""

		if not self.policy.apply_group_restriction:
			return GroupRestriction.NOT_APPLICABLE
		if not identity.groups:
			return GroupRestriction.NO_GROUPS
		if self.policy.site_restricted_groups and not self.policy.site_restricted_groups.issubset(identity.groups):
			LOGGER.debug('Missing required groups for %s: %s', identity, self.policy.site_restricted_groups.difference(identity.groups))
			return GroupRestriction.MISSING_REQUIRED_GROUPS
		return GroupRestriction.PASSED

	def find_existing_account(self, identity, provider_name=None):
		"""Existing account
		The account a reconciliation of the identity would end up with, if it exists already: the one behind the passport or, when linking is allowed, the one with the same email. It only reads, so it can be checked before the login refreshes the account.

		:param identity: the identity
		:type identity: okta_login.identity.ExternalIdentity
		:param provider_name: the provider name, defaults to the one in the identity
		:type provider_name: str|None
		:return: the account or None
		:rtype: okta_login.models.AbstractOktaAccount|None
		"""

		if provider_name is None:
			provider_name = identity.provider
		if provider_name:
			passport = Passport.objects.find(identity.identifier, provider_name)
			if (passport is not None) and (passport.account is not None):
				return passport.account
		if identity.email and self.policy.link_existing_account:
			return get_user_model().objects.get_by_email(identity.email)
		return None

	def reconcile(self, identity, provider_name=None):
		"""Reconcile an identity
		The whole login decision. The database work happens in a single transaction which gets rolled back on rejection; the audit record is written afterwards.

		:param identity: the verified identity
		:type identity: okta_login.identity.ExternalIdentity
		:param provider_name: the provider name, defaults to the one in the identity
		:type provider_name: str|None
		:return: the account to log in, or the rejection
		:rtype: okta_login.models.AbstractOktaAccount|Rejection
		"""

		if provider_name is None:
			provider_name = identity.provider
		LOGGER.debug('Reconciling Okta identity: %s', identity)
		state = ReconcileStates.IDENTITY_VERIFIED

		restriction = self.check_group_restriction(identity)
		if restriction.failure_code is not None:
			return self.reject(restriction.failure_code, state, identity, provider_name)
		state = ReconcileStates.GROUP_CHECKED

		failure_code = self.validate_identity(identity, provider_name)
		if failure_code is not None:
			return self.reject(failure_code, state, identity, provider_name)

		with transaction.atomic():
			passport = Passport.objects.find(identity.identifier, provider_name)
			state = ReconcileStates.PASSPORT_RESOLVED
			resolution = self._account_for_passport(passport, identity, provider_name)
			if resolution.ok:
				state = ReconcileStates.ACCOUNT_RESOLVED
				resolution.account.sync_from_identity(identity, self.policy.profile_fields)
				assign_okta_groups(resolution.account, identity.groups)
				state = ReconcileStates.GROUPS_ASSIGNED
			else:
				transaction.set_rollback(True)

		if not resolution.ok:
			return self.reject(resolution.failure, state, identity, provider_name)

		if resolution.created:
			send_and_report(okta_account_created, 'Okta account created', sender=type(resolution.account), account=resolution.account, identity=identity)
		LOGGER.debug('Reconciliation %s: %s -> %s', ReconcileStates.DONE.value, identity, resolution.account)
		return resolution.account

	def reject(self, code, state, identity, provider_name):
		"""Reject the login
		Writes the audit record and builds the rejection.

		:param code: the failure code
		:type code: FailureCodes
		:param state: the state the reconciliation was in
		:type state: ReconcileStates
		:param identity: the identity
		:type identity: okta_login.identity.ExternalIdentity
		:param provider_name: the provider name
		:type provider_name: str
		:return: the rejection
		:rtype: Rejection
		"""

		failure = record_login_failure(code, provider=provider_name, user_identifier=identity.identifier)
		rejection = Rejection(
			code=FailureCodes(code),
			message_id=failure.message_id,
			rejected_at=state,
			provider=provider_name or '',
			user_identifier=identity.identifier,
		)
		send_and_report(okta_login_rejected, 'Okta login rejected', sender=type(self), rejection=rejection, identity=identity)
		return rejection

	def resolve_account(self, identity, provider_name):
		"""Resolve the account
		Finds the account by email. If there's none it gets created; if there's one it gets linked (its fields updated from the identity) unless the policy forbids it.

		:param identity: the identity
		:type identity: okta_login.identity.ExternalIdentity
		:param provider_name: the provider name
		:type provider_name: str
		:return: the resolution
		:rtype: Resolution
		"""

		failure_code = self.validate_identity(identity, provider_name)
		if failure_code is not None:
			return Resolution(failure=failure_code)

		UserModel = get_user_model()
		with transaction.atomic():
			account = UserModel.objects.get_by_email(identity.email)
			if account is None:
				return Resolution(account=UserModel.objects.create_from_identity(identity), created=True)
			if not self.policy.link_existing_account:
				LOGGER.debug('Linking existing accounts is disabled, refusing: %s -> %s', identity, account)
				return Resolution(failure=FailureCodes.MEMBER_COLLISION)
			LOGGER.info('Linking existing account with Okta identity: %s <- %s', account, identity)
			account.map_identity(identity)
			account.save()
			return Resolution(account=account)

	@staticmethod
	def validate_identity(identity, provider_name):
		"""Minimum identity requirements
		An email and a provider name.

		:return: the failure code, if any
		:rtype: FailureCodes|None
		"""

		if not identity.email:
			return FailureCodes.MISSING_EMAIL
		if not provider_name:
			return FailureCodes.NO_PROVIDER_NAME
		return None
