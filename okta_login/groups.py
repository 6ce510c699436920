"""
Okta groups assignment.
"""

from logging import getLogger

from django.contrib.auth.models import Group
from django.utils.timezone import now

from .models import OktaGroup
from .signals import okta_group_created, send_and_report

LOGGER = getLogger(__name__)


def get_okta_group(name):
	"""Get an Okta group
	Fetch the Okta group with that name, creating it if needed. A local group (not flagged as an Okta group) with the same name is left alone and None is returned, so Okta can't hand out its memberships.

	:param name: the group name
	:type name: str
	:return: the group, or None if the name belongs to a local group
	:rtype: Group|None
	"""

	group, created = Group.objects.get_or_create(name=name)
	if created:
		LOGGER.debug('Created new local group: %s', group)
	elif not OktaGroup.objects.filter(group=group, is_okta_group=True).exists():
		LOGGER.warning('Group "%s" is a local group, not assigning it from Okta', group)
		return None

	OktaGroup.objects.update_or_create(group=group, defaults={'is_okta_group': True, 'last_assigned': now()})
	if created:
		send_and_report(okta_group_created, 'Okta group created', sender=group)
	return group


def assign_okta_groups(account, group_names):
	"""Assign Okta groups
	Makes the account a member of every group named, creating the groups as needed. It only adds memberships: groups that Okta doesn't report anymore are left alone, and so is every non Okta group (even one named like an Okta group).

	:param account: the account
	:type account: okta_login.models.AbstractOktaAccount
	:param group_names: the names of the Okta groups of the user
	:type group_names: list[str]|None
	:return: the primary keys of the groups touched
	:rtype: set[int]
	"""

	groups = {}
	for name in group_names or ():
		name = str(name).strip()
		if name and (name not in groups):
			groups[name] = get_okta_group(name)
	groups = {name: group for name, group in groups.items() if group is not None}

	if groups:
		LOGGER.debug('Updating Okta groups for user: %s <- %s', account, list(groups.keys()))
		account.groups.add(*groups.values())
	return {group.pk for group in groups.values()}


def okta_groups_for(account):
	"""Okta groups of an account
	The account's direct memberships to Okta groups.

	:param account: the account
	:type account: okta_login.models.AbstractOktaAccount
	:return: the groups
	:rtype: QuerySet[Group]
	"""

	return account.groups.filter(okta__is_okta_group=True)
