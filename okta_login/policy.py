#python
"""Login policy
The knobs of the Okta login, read from the "OKTA_LOGIN" section of the Django settings.
"""

from dataclasses import dataclass, field
from logging import getLogger

from django.conf import settings

DEFAULT_PROVIDER_NAME = 'Okta'
LOGGER = getLogger(__name__)


@dataclass(frozen=True)
class LoginPolicy:
	"""Okta login policy
	Explicit configuration for the reconciliation, the lockout gate and the stale account sweep. Pass one around instead of reading the settings everywhere.
	"""

	link_existing_account: bool = True
	apply_group_restriction: bool = True
	site_restricted_groups: frozenset = frozenset()
	profile_fields: tuple = ()
	lockout_after_days: int = 0
	stale_after_days: int = 0
	provider_name: str = DEFAULT_PROVIDER_NAME
	api: dict = field(default_factory=dict, compare=False)

	@classmethod
	def from_settings(cls, django_settings=settings):
		"""Policy from Django settings
		Missing keys take the defaults. A single string in SITE_RESTRICTED_GROUPS is considered one group.

		:param django_settings: the Django settings object, defaults to `settings`
		:type django_settings: object
		:return: the policy
		:rtype: LoginPolicy
		"""

		okta_settings = getattr(django_settings, 'OKTA_LOGIN', {})

		restricted_groups = okta_settings.get('SITE_RESTRICTED_GROUPS') or ()
		if isinstance(restricted_groups, str):
			restricted_groups = (restricted_groups,)

		return cls(
			link_existing_account=bool(okta_settings.get('LINK_EXISTING_ACCOUNT', True)),
			apply_group_restriction=bool(okta_settings.get('APPLY_GROUP_RESTRICTION', True)),
			site_restricted_groups=frozenset(restricted_groups),
			profile_fields=tuple(okta_settings.get('PROFILE_FIELDS') or ()),
			lockout_after_days=int(okta_settings.get('LOCKOUT_AFTER_DAYS') or 0),
			stale_after_days=int(okta_settings.get('STALE_AFTER_DAYS') or 0),
			provider_name=okta_settings.get('PROVIDER_NAME') or DEFAULT_PROVIDER_NAME,
			api=dict(okta_settings.get('API') or {}),
		)
