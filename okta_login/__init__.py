#! python
'''Okta login Django app
This app lets a Django site sign in its users with Okta (OAuth2/OIDC), reconciling each verified identity with a local account.

It defines a custom AUTH_USER_MODEL carrying the Okta specific fields (cached profile, last sync, unlink timestamp) and the "passport" records linking Okta identities to local accounts. Logins can be restricted by Okta group membership and the Okta groups are mirrored as local groups.

There's also the tooling to find stale accounts (not synced from Okta for a while) and to unlink or remove them.

Refs:
- https://developer.okta.com/docs/reference/api/users/#default-profile-properties
- https://developer.okta.com/docs/guides/customize-tokens-groups-claim/
'''

__version__ = '0.1.0'
