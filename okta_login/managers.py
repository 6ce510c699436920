#python
"""Okta login managers module
This module defines the custom managers for the Okta account model and the passports.
"""

from logging import getLogger

from django.contrib.auth.base_user import BaseUserManager
from django.db import IntegrityError, transaction
from django.db.models import Manager, QuerySet

LOGGER = getLogger(__name__)


class OktaAccountQuerySet(QuerySet):
	"""Okta accounts queryset
	Lookups for the Okta account lifecycle.
	"""

	def linked(self):
		"""Accounts still linked with Okta"""

		return self.filter(okta_unlinked_when__isnull=True)

	def never_synced(self):
		"""Accounts never synchronized from Okta"""

		return self.filter(okta_last_sync__isnull=True)

	def stale(self, before):
		"""Stale accounts
		Accounts whose last sync is strictly earlier than "before". Accounts never synced or already unlinked are not included. It's a plain query, nothing gets changed.

		:param before: the threshold
		:type before: datetime
		:return: the stale accounts
		:rtype: OktaAccountQuerySet
		"""

		return self.linked().filter(okta_last_sync__isnull=False, okta_last_sync__lt=before)

	def unlinked(self):
		"""Accounts unlinked from Okta"""

		return self.filter(okta_unlinked_when__isnull=False)


class OktaAccountManager(BaseUserManager.from_queryset(OktaAccountQuerySet)):
	"""Okta account manager
	Custom user manager for the Okta account model.
	"""

	use_in_migrations = True

	def create_from_identity(self, identity):
		"""Create from identity
		Creates an account from an external identity. The account can't be used with a local password.

		:param identity: the identity to base the account on
		:type identity: okta_login.identity.ExternalIdentity
		:return: the model object
		:rtype: self.model
		"""

		account = self.model()
		account.map_identity(identity)
		account.set_unusable_password()
		account.save()
		LOGGER.info('Created local account from Okta identity: %s <- %s', account, identity)
		return account

	def create_user(self, email, password=None, **other_fields):
		"""Create a local user
		Create and save a user with the provided details. Without a password the account can only be used through Okta.

		:param email: the email of the user (username)
		:type email: str
		:param password: the password for the user
		:type password: str
		:param other_fields: other fields passed to the user model
		:type other_fields: any
		:return: the model object
		:rtype: self.model
		"""

		if not email:
			raise ValueError('The email must be set')

		user = self.model(email=self.normalize_email(email), **other_fields)
		if password is None:
			user.set_unusable_password()
		else:
			user.set_password(password)
		user.save(using=self._db)
		return user

	def create_superuser(self, email, password=None, **other_fields):
		"""Create a local superuser
		Create and save a superuser with the provided details, including a password.

		:param email: the email of the user (username)
		:type email: str
		:param password: the password for the user
		:type password: str
		:param other_fields: other fields passed to the user model
		:type other_fields: any
		:return: the model object
		:rtype: self.model
		"""

		other_fields.setdefault('is_staff', True)
		other_fields.setdefault('is_superuser', True)
		other_fields.setdefault('is_active', True)

		if other_fields.get('is_staff') is not True:
			raise ValueError('Superuser must have is_staff=True.')
		if other_fields.get('is_superuser') is not True:
			raise ValueError('Superuser must have is_superuser=True.')

		return self.create_user(email, password=password, **other_fields)

	def get_by_email(self, email):
		"""Get by email
		Case insensitive lookup by email.

		:param email: the email to look for
		:type email: str
		:return: the matching account or None
		:rtype: self.model|None
		"""

		return self.filter(email__iexact=email).first()

	def get_by_natural_key(self, username):
		return self.get(**{'{}__iexact'.format(self.model.USERNAME_FIELD): username})


class PassportManager(Manager):
	"""Passport store
	Lookups and writes for the passports. The (identifier, provider) uniqueness is enforced by the database; this manager never checks before inserting.
	"""

	def create_link(self, identifier, provider, account):
		"""Create a passport
		Inserts the passport in its own savepoint. When the (identifier, provider) pair is already taken the insert is rolled back and None is returned.

		:param identifier: the user identifier at the provider
		:type identifier: str
		:param provider: the provider name
		:type provider: str
		:param account: the local account
		:type account: okta_login.models.AbstractOktaAccount
		:return: the new passport, or None on collision
		:rtype: self.model|None
		"""

		try:
			with transaction.atomic(using=self.db):
				passport = self.create(identifier=identifier, provider=provider, account=account)
		except IntegrityError:
			LOGGER.warning('A passport already exists for: %s@%s', identifier, provider)
			return None

		LOGGER.debug('Created passport: %s -> %s', passport, account)
		return passport

	def find(self, identifier, provider):
		"""Find a passport

		:param identifier: the user identifier at the provider
		:type identifier: str
		:param provider: the provider name
		:type provider: str
		:return: the passport or None
		:rtype: self.model|None
		"""

		return self.select_related('account').filter(identifier=identifier, provider=provider).first()

	def for_account(self, account):
		"""Passports of an account"""

		return self.filter(account=account)

	def repoint(self, passport, account):
		"""Repoint a passport
		Links an existing passport with a different account (used when the previous account is gone).

		:param passport: the passport to change
		:type passport: self.model
		:param account: the new account
		:type account: okta_login.models.AbstractOktaAccount
		:return: the passport
		:rtype: self.model
		"""

		LOGGER.debug('Repointing passport %s: %s -> %s', passport, passport.account_id, account)
		passport.account = account
		passport.save(update_fields=['account'])
		return passport
