#python
"""Account lifecycle
Staleness of the Okta accounts: who can still log in, who hasn't been synchronized for too long, and how to unlink them.
"""

from datetime import timedelta as TimeDelta
from logging import getLogger

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils.timezone import now as now_
from django.utils.translation import gettext_lazy as _

from .models import Passport
from .signals import okta_account_unlinked, send_and_report

ACCOUNT_TOO_OLD_MESSAGE = _('Sorry, you cannot sign in to this website as your account has not been used recently. Please contact a website administrator for further assistance.')
LOGGER = getLogger(__name__)


def can_log_in(account, lockout_after_days, now=None):
	"""Login eligibility
	An account is too old to log in when its last sync plus "lockout_after_days" days is already in the past. Accounts never synced are always allowed (they haven't gone through a sync cycle yet), and so is everybody when the setting is 0 or less.

	:param account: the account to check
	:type account: okta_login.models.AbstractOktaAccount
	:param lockout_after_days: days after the last sync
	:type lockout_after_days: int
	:param now: the current time, defaults to now
	:type now: datetime
	:return: True if the account can log in
	:rtype: bool
	"""

	if int(lockout_after_days or 0) <= 0:
		return True
	if account.okta_last_sync is None:
		return True

	if now is None:
		now = now_()
	return not ((account.okta_last_sync + TimeDelta(days=int(lockout_after_days))) < now)


def find_stale_accounts(days, now=None):
	"""Find stale accounts
	Accounts whose last sync is older than "days" days and that are still linked. Nothing is returned when "days" is 0 or less (staleness disabled).

	:param days: the age threshold in days
	:type days: int
	:param now: the current time, defaults to now
	:type now: datetime
	:return: the stale accounts
	:rtype: QuerySet
	"""

	UserModel = get_user_model()
	if int(days or 0) <= 0:
		return UserModel.objects.none()
	return UserModel.objects.stale(stale_threshold(days, now=now))


def stale_threshold(days, now=None):
	"""Stale threshold
	The point in time before which a last sync is considered stale.

	:param days: the age threshold in days
	:type days: int
	:param now: the current time, defaults to now
	:type now: datetime
	:return: now minus "days" days
	:rtype: datetime
	"""

	if now is None:
		now = now_()
	return now - TimeDelta(days=int(days))


def unlink_account(account, remove=False):
	"""Unlink an account
	Detaches the account from Okta: its passports are deleted and the account is deactivated with the unlink timestamp set. If "remove" is set the account is deleted instead.

	:param account: the account to unlink
	:type account: okta_login.models.AbstractOktaAccount
	:param remove: delete the account
	:type remove: bool
	:return: the account (already deleted if "remove")
	:rtype: okta_login.models.AbstractOktaAccount
	"""

	with transaction.atomic():
		passports = Passport.objects.for_account(account).delete()[0]
		if remove:
			LOGGER.info('Removing stale Okta account (%s passports): %s', passports, account)
			account.delete()
		else:
			LOGGER.info('Unlinking stale Okta account (%s passports): %s', passports, account)
			account.okta_unlinked_when = now_()
			account.is_active = False
			account.save(update_fields=['okta_unlinked_when', 'is_active'])

	send_and_report(okta_account_unlinked, 'Okta account unlinked', sender=type(account), account=account, removed=remove)
	return account


def unlink_stale_accounts(days, remove=False, dry_run=False, now=None):
	"""Unlink stale accounts
	Applies "unlink_account" to every stale account.

	:param days: the age threshold in days
	:type days: int
	:param remove: delete the accounts instead of deactivating them
	:type remove: bool
	:param dry_run: only report, change nothing
	:type dry_run: bool
	:param now: the current time, defaults to now
	:type now: datetime
	:return: the affected accounts
	:rtype: list
	"""

	stale_accounts = list(find_stale_accounts(days, now=now))
	if dry_run:
		LOGGER.info('Dry run, %s stale Okta accounts left untouched', len(stale_accounts))
		return stale_accounts

	for account in stale_accounts:
		unlink_account(account, remove=remove)
	return stale_accounts
