#python
"""Okta application user sync
Refreshes the local accounts of the users assigned to the Okta application, without waiting for them to log in. Accounts are never created here, that only happens on login.
"""

from logging import getLogger

from django.contrib.auth import get_user_model
from django.db import transaction

from tqdm import tqdm as TQDM

from .api_client import OktaAPIClient
from .groups import assign_okta_groups
from .identity import ExternalIdentity
from .models import Passport
from .policy import LoginPolicy

LOGGER = getLogger(__name__)


class OktaAppUserSync:
	"""App user sync
	Walks the users assigned to the Okta application and refreshes the matching local accounts: cached profile, last sync and (optionally) groups.
	"""

	def __init__(self, api_client=None, policy=None, dry_run=False):
		"""Init

		:param api_client: the Okta API client, a new one from the settings by default
		:type api_client: OktaAPIClient|None
		:param policy: the login policy, from the settings by default
		:type policy: LoginPolicy|None
		:param dry_run: find the accounts but change nothing
		:type dry_run: bool
		"""

		self.policy = LoginPolicy.from_settings() if policy is None else policy
		self.api_client = OktaAPIClient(self.policy.api) if api_client is None else api_client
		self.dry_run = dry_run

	def find_account(self, identity):
		"""Find the local account
		Through the passport first, then through the Okta login.

		:param identity: the identity from Okta
		:type identity: ExternalIdentity
		:return: the account or None
		:rtype: UserModel|None
		"""

		passport = Passport.objects.find(identity.identifier, identity.provider)
		if (passport is not None) and (passport.account is not None):
			return passport.account
		if identity.login:
			return get_user_model().objects.filter(okta_profile_login=identity.login).first()
		return None

	def get_stale_account_list(self, before):
		"""Stale accounts
		Accounts not synchronized since "before" (and not unlinked yet).

		:param before: the threshold
		:type before: datetime
		:return: the stale accounts
		:rtype: QuerySet
		"""

		return get_user_model().objects.stale(before)

	def run(self, app_id=None, include_groups=True, show_progress=False):
		"""Run the sync
		Fetches the application users and updates every local account found.

		:param app_id: the Okta application ID, defaults to the one in the API settings
		:type app_id: str|None
		:param include_groups: also assign the Okta groups
		:type include_groups: bool
		:param show_progress: generate progress bar for the console output
		:type show_progress: bool
		:return: the number of accounts updated and skipped
		:rtype: tuple[int, int]
		"""

		app_id = self.api_client.app_id if app_id is None else app_id
		if not app_id:
			raise ValueError('Missing the Okta application ID')

		app_users = self.api_client.list_application_users(app_id)
		updated, skipped = 0, 0
		pbar = TQDM(desc='Syncing Okta application users', total=len(app_users), disable=not show_progress, unit='users', dynamic_ncols=True)
		for app_user in app_users:
			try:
				synced = self.sync_user(app_user.id, include_groups=include_groups)
			except Exception:
				LOGGER.exception('Okta sync failed for application user: %s', app_user.id)
				synced = False
			if synced:
				updated += 1
			else:
				skipped += 1
			pbar.update()
		pbar.close()

		LOGGER.info('Okta application sync done: %s updated, %s skipped', updated, skipped)
		return updated, skipped

	def sync_user(self, user_id, include_groups=True):
		"""Sync one user
		Fetches the Okta user and refreshes the matching local account.

		:param user_id: the Okta ID of the user
		:type user_id: str
		:param include_groups: also assign the Okta groups
		:type include_groups: bool
		:return: True if a local account was updated
		:rtype: bool
		"""

		okta_user = self.api_client.get_user(user_id)
		if okta_user is None:
			LOGGER.debug('Okta user not found: %s', user_id)
			return False

		groups = self.api_client.list_user_group_names(user_id) if include_groups else None
		identity = ExternalIdentity.from_okta_user(okta_user, self.policy.provider_name, groups=groups)
		account = self.find_account(identity)
		if account is None:
			LOGGER.debug('No local account for Okta user: %s', identity)
			return False

		if self.dry_run:
			LOGGER.info('Dry run, not updating: %s <- %s', account, identity)
			return True

		with transaction.atomic():
			account.sync_from_identity(identity, self.policy.profile_fields)
			if groups is not None:
				assign_okta_groups(account, groups)
		LOGGER.debug('Synced local account from Okta: %s <- %s', account, identity)
		return True
