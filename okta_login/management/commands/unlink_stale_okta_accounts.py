#!python3
"""
Custom command to unlink (or remove) the accounts not synchronized from Okta for a while.
"""

from logging import getLogger

from django.core.management.base import BaseCommand, CommandError

from ...lifecycle import unlink_stale_accounts
from ...policy import LoginPolicy

LOGGER = getLogger(__name__)


class Command(BaseCommand):
	"""
	The custom command
	"""

	help = "Unlink the accounts whose last Okta sync is older than the given number of days"

	def add_arguments(self, parser):
		"""
		Adding some optional parameters
		"""

		parser.add_argument('--days', type=int, default=None, help='Age threshold in days; defaults to the STALE_AFTER_DAYS setting')
		parser.add_argument('--remove', action='store_true', help='Delete the stale accounts instead of deactivating them')
		parser.add_argument('--dry-run', action='store_true', help='List the stale accounts but change nothing')

	def handle(self, *args, **options):
		"""Actual command behavior
		Nothing happens if the threshold is 0 or less (staleness disabled).
		"""

		days = LoginPolicy.from_settings().stale_after_days if options['days'] is None else options['days']
		if days <= 0:
			raise CommandError('Stale account checks are disabled (the days threshold must be greater than 0)')

		accounts = unlink_stale_accounts(days, remove=options['remove'], dry_run=options['dry_run'])
		for account in accounts:
			self.stdout.write(f'{account} (last sync: {account.okta_last_sync})')

		if options['dry_run']:
			self.stdout.write(self.style.NOTICE(f'Found {len(accounts)} stale accounts, nothing changed'))
		elif options['remove']:
			self.stdout.write(self.style.SUCCESS(f'Removed {len(accounts)} stale accounts'))
		else:
			self.stdout.write(self.style.SUCCESS(f'Unlinked {len(accounts)} stale accounts'))
