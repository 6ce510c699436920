#!python3
"""
Custom command to refresh the local accounts of the users assigned to the Okta application.
"""

from logging import getLogger

from django.core.management.base import BaseCommand, CommandError

from ...api_client import OktaAPIClient
from ...policy import LoginPolicy
from ...sync import OktaAppUserSync

LOGGER = getLogger(__name__)


class Command(BaseCommand):
	"""
	The custom command
	"""

	help = "Refresh the local accounts of the Okta application users via Okta API"

	def add_arguments(self, parser):
		"""
		Adding some optional parameters
		"""

		parser.add_argument('--app-id', default=None, help='The Okta application ID; defaults to the APP_ID in the API settings')
		parser.add_argument('--no-groups', action='store_true', help="Don't assign groups")
		parser.add_argument('--dry-run', action='store_true', help='Find the accounts but change nothing')

	def handle(self, *args, **options):
		"""Actual command behavior
		Checks the API client first, then runs the sync.
		"""

		policy = LoginPolicy.from_settings()
		api_client = OktaAPIClient(policy.api)
		if not api_client.ping_users_endpoint():
			raise CommandError("The Okta API client doesn't seem to be configured or functional")
		self.stdout.write('The Okta client is configured and functional')

		app_sync = OktaAppUserSync(api_client=api_client, policy=policy, dry_run=options['dry_run'])
		try:
			updated, skipped = app_sync.run(app_id=options['app_id'], include_groups=not options['no_groups'], show_progress=options['verbosity'] > 0)
		except ValueError as error_:
			raise CommandError(str(error_))

		if updated:
			self.stdout.write(self.style.SUCCESS(f'Successfully updated {updated} accounts'))
		else:
			self.stdout.write(self.style.WARNING('No accounts were updated'))
		if skipped:
			self.stdout.write(self.style.NOTICE(f'Skipped {skipped} Okta users without a local account (or failing)'))
