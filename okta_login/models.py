#python
"""Okta Login Models
This module defines the Django models for the Okta login: the account (user model), the passports linking it with Okta identities, the Okta group flag and the login failure audit trail.
"""

from logging import getLogger

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, Group, PermissionsMixin
from django.db.models import CASCADE, SET_NULL, BooleanField, CharField, DateTimeField, EmailField, ForeignKey, IntegerChoices, JSONField, Model, OneToOneField, PositiveIntegerField, PositiveSmallIntegerField, UniqueConstraint
from django.utils.timezone import now
from django.utils.translation import gettext_lazy as _

from .managers import OktaAccountManager, PassportManager

LOGGER = getLogger(__name__)


class FailureCodes(IntegerChoices):
	"""Login failure codes
	The labels are meant for logs and the admin only, the user gets the generic support message.
	"""

	NO_GROUPS = 100, _('User has no Okta groups')
	MEMBER_COLLISION = 101, _('User/account collision')
	MISSING_REQUIRED_GROUPS = 102, _('User missing required groups')
	MISSING_EMAIL = 103, _('User missing email')
	MEMBER_EMAIL_MISMATCH = 104, _('User/account email mismatch')
	MEMBER_PASSPORT_MISMATCH = 105, _('User/account/passport mismatch')
	CREATE_IDENT_COLLISION = 106, _('Tried to create a passport when one existed for the identifier/provider')
	NO_PROVIDER_NAME = 200, _('No provider name')
	NO_PASSPORT_NO_ACCOUNT_CREATED = 300, _('No passport found and no account created')
	PASSPORT_NO_ACCOUNT_CREATED = 301, _('Passport found but no account created')


class AbstractOktaAccount(AbstractBaseUser, PermissionsMixin):
	"""Okta account
	Local account for users signing in with Okta. The email is the username; the Okta specific fields live right here.
	"""

	ACCOUNT_PROFILE_FIELDS = ('firstName', 'lastName', 'displayName', 'nickName', 'locale', 'timezone')

	email = EmailField(unique=True, verbose_name=_('email'), help_text=_('Primary email address of user'))
	firstName = CharField(blank=True, max_length=50, verbose_name=_('first name'), help_text=_('Given name of the user (givenName)'))
	lastName = CharField(blank=True, max_length=50, verbose_name=_('last name'), help_text=_('Family name of the user (familyName)'))
	displayName = CharField(blank=True, max_length=250, verbose_name=_('display name'), help_text=_('Name of the user, suitable for display to end users'))
	nickName = CharField(blank=True, max_length=50, verbose_name=_('nickname'), help_text=_('Casual way to address the user in real life'))
	locale = CharField(blank=True, max_length=5, verbose_name=_('locale'), help_text=_("User's default location for purposes of localizing items such as currency, date time format, numerical representations, etc."))
	timezone = CharField(blank=True, max_length=100, verbose_name=_('time zone'), help_text=_("User's time zone"))

	is_active = BooleanField(default=True, verbose_name=_("active"), help_text=_('Designates whether this user should be treated as active. \nUnselect this instead of deleting accounts.'))
	is_staff = BooleanField(default=False, verbose_name=_("staff status"), help_text=_("Designates whether the user can log into the admin site."))
	date_joined = DateTimeField(auto_now_add=True, verbose_name=_("date joined"), help_text=_('The timestamp when the local account was created'))

	okta_profile = JSONField(default=dict, blank=True, verbose_name=_('Okta profile'), help_text=_('Latest profile data received from Okta (only the configured fields)'))
	okta_profile_login = CharField(null=True, blank=True, unique=True, max_length=100, verbose_name=_('Okta login'), help_text=_('The "login" attribute of the Okta profile'))
	okta_last_sync = DateTimeField(null=True, blank=True, db_index=True, verbose_name=_('last sync'), help_text=_('The last time the account was synchronized from Okta'))
	okta_unlinked_when = DateTimeField(null=True, blank=True, db_index=True, verbose_name=_('unlinked'), help_text=_('When this account was unlinked from its Okta profile'))

	objects = OktaAccountManager()

	EMAIL_FIELD = 'email'
	USERNAME_FIELD = 'email'
	REQUIRED_FIELDS = []

	class Meta:
		verbose_name = _('okta account')
		verbose_name_plural = _('okta accounts')
		abstract = True

	def __str__(self):
		"""String representation of the account.

		:return: The email of the account.
		:rtype: str
		"""

		return self.email

	def clear_last_sync(self, save_model=True):
		"""Clear the last sync
		Administrative action: forget when the account was last synchronized, which puts it back in the "never synced" grace period.

		:param save_model: save the change right away
		:type save_model: bool
		"""

		LOGGER.info('Clearing the Okta last sync timestamp of: %s', self)
		self.okta_last_sync = None
		if save_model:
			self.save(update_fields=['okta_last_sync'])

	def get_full_name(self):
		"""Returns the user's full name.
		This method prioritizes the `displayName` field. If `displayName` is not set, it joins `firstName` and `lastName`.

		:return: The user's full name
		:rtype: str
		"""

		if self.displayName:
			return self.displayName
		else:
			return ' '.join([name for name in (self.firstName, self.lastName) if name])

	def get_passport(self, provider):
		"""Get a passport
		The passport linking this account with the given provider, if any.

		:param provider: the provider name
		:type provider: str
		:return: the passport or None
		:rtype: Passport|None
		"""

		return self.passports.filter(provider=provider).first()

	def get_short_name(self):
		"""Returns the user's short name.
		This method prioritizes the `nickName` field. If `nickName` is not set, it returns the `firstName`.

		:return: The user's short name
		:rtype: str
		"""

		if self.nickName:
			return self.nickName
		else:
			return self.firstName

	@property
	def is_unlinked(self):
		"""Unlinked from Okta?"""

		return self.okta_unlinked_when is not None

	def map_identity(self, identity):
		"""Map identity attributes
		Copies the email and the known profile attributes of the identity onto the account. Empty values are skipped, so they don't wipe local data.

		:param identity: the external identity
		:type identity: okta_login.identity.ExternalIdentity
		:return: the account itself
		:rtype: AbstractOktaAccount
		"""

		attributes = {'email': type(self).objects.normalize_email(identity.email)}
		for field_name in self.ACCOUNT_PROFILE_FIELDS:
			value = identity.profile.get(field_name)
			if (value is None) or (isinstance(value, str) and not len(value)):
				continue
			attributes[field_name] = value
		self.update(**attributes)
		return self

	def sync_from_identity(self, identity, profile_fields=(), save_model=True):
		"""Sync from identity
		Refreshes the cached Okta profile (only the requested fields, in that order) and the Okta login, and stamps the sync time. An Okta login can only belong to one account: if another account still holds it (the login moved to a different Okta user) it gets released.

		:param identity: the external identity
		:type identity: okta_login.identity.ExternalIdentity
		:param profile_fields: the profile attributes to cache
		:type profile_fields: list[str]
		:param save_model: save the changes right away
		:type save_model: bool
		"""

		self.okta_profile = {field_name: identity.profile.get(field_name) for field_name in profile_fields}
		self.okta_profile_login = identity.login
		self.okta_last_sync = now()
		if save_model:
			if self.okta_profile_login:
				previous_holders = type(self)._default_manager.filter(okta_profile_login=self.okta_profile_login).exclude(pk=self.pk)
				if previous_holders.update(okta_profile_login=None):
					LOGGER.info('Okta login "%s" moved to account: %s', self.okta_profile_login, self)
			self.save(update_fields=['okta_profile', 'okta_profile_login', 'okta_last_sync'])

	def update(self, **updated_values):
		"""Updates user attributes from a dictionary of values.
		Only fields that exist on the model are updated; any unknown field is ignored and a warning is logged.

		:param updated_values: Keyword arguments where keys are model field names and values are the new values for those fields.
		"""

		local_fields = [field.name for field in self._meta.fields]
		for key, value in updated_values.items():
			if key in local_fields:
				setattr(self, key, value)
			else:
				LOGGER.warning('Dropping unknown field "%s" in object: %s', key, type(self))


class OktaAccount(AbstractOktaAccount):
	"""Django user model
	Alternate user model for Django sites signing in with Okta.
	"""

	class Meta(AbstractOktaAccount.Meta):
		swappable = 'AUTH_USER_MODEL'


class Passport(Model):
	"""Passport
	Link between one Okta identity (identifier + provider) and one local account. The account reference survives the account deletion as NULL, so the passport can be repointed later.
	"""

	identifier = CharField(max_length=255, verbose_name=_('identifier'), help_text=_('Unique identifier of the user at the provider'))
	provider = CharField(max_length=100, verbose_name=_('provider'), help_text=_('Name of the OAuth provider'))
	account = ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=SET_NULL, related_name='passports', verbose_name=_('account'))
	created = DateTimeField(auto_now_add=True, verbose_name=_('created'))

	objects = PassportManager()

	class Meta:
		verbose_name = _('passport')
		verbose_name_plural = _('passports')
		constraints = [
			UniqueConstraint(fields=['identifier', 'provider'], name='okta_login_passport_unique_identity'),
		]

	def __str__(self):
		return '{}@{}'.format(self.identifier, self.provider)


class OktaGroup(Model):
	"""Okta group flag
	Marks a local group as sourced from Okta. Only memberships of these groups are written by the login.
	"""

	group = OneToOneField(Group, primary_key=True, on_delete=CASCADE, related_name='okta', verbose_name=_('group'))
	is_okta_group = BooleanField(default=True, verbose_name=_('Okta group'), help_text=_('The group comes from Okta'))
	last_assigned = DateTimeField(null=True, blank=True, verbose_name=_('last assigned'), help_text=_('The last time a login reported this group'))

	class Meta:
		verbose_name = _('okta group')
		verbose_name_plural = _('okta groups')

	def __str__(self):
		return self.group.name


class LoginFailure(Model):
	"""Login failure
	Audit record of a rejected login. Append only: the records are never updated.
	"""

	code = PositiveSmallIntegerField(choices=FailureCodes.choices, verbose_name=_('code'))
	message_id = PositiveIntegerField(db_index=True, verbose_name=_('message ID'), help_text=_('The number quoted to the user'))
	provider = CharField(blank=True, max_length=100, verbose_name=_('provider'))
	user_identifier = CharField(blank=True, max_length=255, verbose_name=_('user identifier'), help_text=_('Identifier of the user at the provider (best effort)'))
	created = DateTimeField(default=now, db_index=True, verbose_name=_('created'))

	class Meta:
		verbose_name = _('login failure')
		verbose_name_plural = _('login failures')
		ordering = ('-created',)

	def __str__(self):
		return '#{} ({})'.format(self.message_id, self.code)

	def save(self, *args, **kwargs):
		"""Insert only
		Audit records can't be changed once written.
		"""

		if not self._state.adding:
			raise ValueError('Login failure records are append only')
		return super().save(*args, **kwargs)
