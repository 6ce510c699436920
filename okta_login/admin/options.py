"""
Admin options for the Okta login models.
"""

from logging import getLogger

from django.contrib.admin import ModelAdmin, action
from django.utils.translation import gettext_lazy as _

from ..lifecycle import unlink_account

LOGGER = getLogger(__name__)


class OktaAccountModelAdmin(ModelAdmin):
	"""Account admin
	Customized user admin for Okta accounts. The Okta fields are read only; the last sync can be cleared with an action.
	"""

	actions = ['clear_last_sync', 'unlink_from_okta']
	fieldsets = (
		('Basic Info', {'fields': ('email', 'firstName', 'lastName')}),
		('Names', {
			'classes': ('collapse',),
			'fields': ('displayName', 'nickName'),
		}),
		('International', {
			'classes': ('collapse',),
			'fields': ('locale', 'timezone'),
		}),
		('Okta', {
			'classes': ('collapse',),
			'fields': ('okta_profile_login', 'okta_profile', 'okta_last_sync', 'okta_unlinked_when'),
		}),
		('Groups', {
			'classes': ('collapse',),
			'fields': ('groups',),
		}),
		('Permissions', {'fields': ('is_staff', 'is_superuser', 'is_active')}),
	)
	list_display = ('email', 'firstName', 'lastName', 'okta_last_sync', 'okta_unlinked_when', 'is_staff', 'is_superuser', 'is_active')
	list_filter = ('is_active', 'is_staff', 'is_superuser')
	ordering = ('email',)
	readonly_fields = ('okta_profile_login', 'okta_profile', 'okta_last_sync', 'okta_unlinked_when')
	search_fields = ('email', 'firstName', 'lastName', 'okta_profile_login')

	@action(description=_('Clear the Okta last sync date'))
	def clear_last_sync(self, request, queryset):
		"""Clear last sync
		Puts the accounts back in the "never synced" state.
		"""

		for account in queryset:
			account.clear_last_sync()
		self.message_user(request, _('Cleared the last sync date of %(count)d accounts') % {'count': len(queryset)})

	@action(description=_('Unlink from Okta (deactivate)'))
	def unlink_from_okta(self, request, queryset):
		"""Unlink
		Deletes the passports and deactivates the accounts.
		"""

		for account in queryset:
			unlink_account(account)
		self.message_user(request, _('Unlinked %(count)d accounts from Okta') % {'count': len(queryset)})


class PassportModelAdmin(ModelAdmin):
	"""Passport admin
	Passports are created by the login; they can be looked at and deleted.
	"""

	list_display = ('identifier', 'provider', 'account', 'created')
	list_filter = ('provider',)
	readonly_fields = ('identifier', 'provider', 'account', 'created')
	search_fields = ('identifier', 'account__email')

	def has_add_permission(self, request):
		return False


class LoginFailureModelAdmin(ModelAdmin):
	"""Login failure admin
	Read only: the support team looks up the message ID quoted by the user.
	"""

	date_hierarchy = 'created'
	list_display = ('message_id', 'code', 'provider', 'user_identifier', 'created')
	list_filter = ('code', 'provider')
	search_fields = ('=message_id', 'user_identifier')

	def has_add_permission(self, request):
		return False

	def has_change_permission(self, request, obj=None):
		return False

	def has_delete_permission(self, request, obj=None):
		return False
