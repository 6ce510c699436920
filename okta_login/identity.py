#python
"""External identity
The verified user descriptor handed over by the OAuth/OIDC layer. It's built once, at the boundary, and the rest of the app only deals with this type.
"""

from dataclasses import dataclass, field
from logging import getLogger
from types import MappingProxyType

LOGGER = getLogger(__name__)

OIDC_CLAIMS_TO_PROFILE = {
	'email': 'email',
	'family_name': 'lastName',
	'given_name': 'firstName',
	'locale': 'locale',
	'middle_name': 'middleName',
	'name': 'displayName',
	'nickname': 'nickName',
	'preferred_username': 'login',
	'profile': 'profileUrl',
	'zoneinfo': 'timezone',
}
OKTA_PROFILE_ATTRIBUTES = (
	'login', 'email', 'secondEmail', 'firstName', 'lastName', 'middleName', 'honorificPrefix', 'honorificSuffix',
	'title', 'displayName', 'nickName', 'profileUrl', 'primaryPhone', 'mobilePhone', 'streetAddress', 'city', 'state',
	'zipCode', 'countryCode', 'postalAddress', 'preferredLanguage', 'locale', 'timezone', 'userType',
	'employeeNumber', 'costCenter', 'organization', 'division', 'department', 'managerId', 'manager',
)
NON_PROFILE_CLAIMS = ('sub', 'groups', 'aud', 'iss', 'iat', 'exp', 'auth_time', 'nonce', 'at_hash', 'amr', 'idp', 'jti', 'ver')


@dataclass(frozen=True)
class ExternalIdentity:
	"""Okta identity
	An already verified identity. The "groups" attribute is None when the provider didn't send a group list at all, which is not the same as an empty list for logging purposes (both fail the group restriction, though).
	"""

	identifier: str
	email: str
	provider: str
	groups: tuple = None
	profile: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

	def __post_init__(self):
		if self.groups is not None:
			object.__setattr__(self, 'groups', tuple(self.groups))
		object.__setattr__(self, 'profile', MappingProxyType(dict(self.profile)))

	def __str__(self):
		return '{}@{}'.format(self.identifier, self.provider)

	@property
	def login(self):
		"""Okta login
		The "login" attribute from the profile, if any.
		"""

		return self.profile.get('login') or None

	@classmethod
	def from_claims(cls, claims, provider):
		"""From OIDC claims
		Builds the identity from the claims of an ID token or the userinfo endpoint. Standard OIDC claims are translated to their Okta profile counterparts (given_name -> firstName, etc.); custom claims are kept as they are.

		:param claims: the verified claims
		:type claims: dict
		:param provider: the name of the provider that produced the claims
		:type provider: str
		:return: the identity
		:rtype: ExternalIdentity
		"""

		profile = {}
		for claim, value in claims.items():
			if claim in NON_PROFILE_CLAIMS:
				continue
			profile[OIDC_CLAIMS_TO_PROFILE.get(claim, claim)] = value

		groups = claims.get('groups')
		if isinstance(groups, str):
			groups = [groups]
		elif not isinstance(groups, (list, tuple)):
			if groups is not None:
				LOGGER.debug('Ignoring unusable "groups" claim for %s: %s', claims.get('sub'), groups)
			groups = None

		return cls(
			identifier=str(claims.get('sub') or ''),
			email=claims.get('email') or '',
			provider=provider or '',
			groups=groups,
			profile=profile,
		)

	@classmethod
	def from_okta_user(cls, okta_user, provider, groups=None):
		"""From Okta API user
		Builds the identity from a user object returned by the Okta SDK.

		:param okta_user: the Okta user
		:type okta_user: okta.models.User
		:param provider: the name of the provider the identity will be linked with
		:type provider: str
		:param groups: the names of the user's groups, if known
		:type groups: list[str]|None
		:return: the identity
		:rtype: ExternalIdentity
		"""

		profile = {}
		for attribute in OKTA_PROFILE_ATTRIBUTES:
			value = getattr(okta_user.profile, attribute, None)
			if (value is None) or (isinstance(value, str) and not len(value)):
				continue
			profile[attribute] = value

		return cls(
			identifier=okta_user.id,
			email=profile.get('email', ''),
			provider=provider or '',
			groups=groups,
			profile=profile,
		)
