import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import okta_login.managers


class Migration(migrations.Migration):

	initial = True

	dependencies = [
		('auth', '0012_alter_user_first_name_max_length'),
	]

	operations = [
		migrations.CreateModel(
			name='OktaAccount',
			fields=[
				('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
				('password', models.CharField(max_length=128, verbose_name='password')),
				('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
				('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
				('email', models.EmailField(help_text='Primary email address of user', max_length=254, unique=True, verbose_name='email')),
				('firstName', models.CharField(blank=True, help_text='Given name of the user (givenName)', max_length=50, verbose_name='first name')),
				('lastName', models.CharField(blank=True, help_text='Family name of the user (familyName)', max_length=50, verbose_name='last name')),
				('displayName', models.CharField(blank=True, help_text='Name of the user, suitable for display to end users', max_length=250, verbose_name='display name')),
				('nickName', models.CharField(blank=True, help_text='Casual way to address the user in real life', max_length=50, verbose_name='nickname')),
				('locale', models.CharField(blank=True, help_text="User's default location for purposes of localizing items such as currency, date time format, numerical representations, etc.", max_length=5, verbose_name='locale')),
				('timezone', models.CharField(blank=True, help_text="User's time zone", max_length=100, verbose_name='time zone')),
				('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. \nUnselect this instead of deleting accounts.', verbose_name='active')),
				('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into the admin site.', verbose_name='staff status')),
				('date_joined', models.DateTimeField(auto_now_add=True, help_text='The timestamp when the local account was created', verbose_name='date joined')),
				('okta_profile', models.JSONField(blank=True, default=dict, help_text='Latest profile data received from Okta (only the configured fields)', verbose_name='Okta profile')),
				('okta_profile_login', models.CharField(blank=True, help_text='The "login" attribute of the Okta profile', max_length=100, null=True, unique=True, verbose_name='Okta login')),
				('okta_last_sync', models.DateTimeField(blank=True, db_index=True, help_text='The last time the account was synchronized from Okta', null=True, verbose_name='last sync')),
				('okta_unlinked_when', models.DateTimeField(blank=True, db_index=True, help_text='When this account was unlinked from its Okta profile', null=True, verbose_name='unlinked')),
				('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
				('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
			],
			options={
				'verbose_name': 'okta account',
				'verbose_name_plural': 'okta accounts',
				'abstract': False,
				'swappable': 'AUTH_USER_MODEL',
			},
			managers=[
				('objects', okta_login.managers.OktaAccountManager()),
			],
		),
		migrations.CreateModel(
			name='LoginFailure',
			fields=[
				('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
				('code', models.PositiveSmallIntegerField(choices=[(100, 'User has no Okta groups'), (101, 'User/account collision'), (102, 'User missing required groups'), (103, 'User missing email'), (104, 'User/account email mismatch'), (105, 'User/account/passport mismatch'), (106, 'Tried to create a passport when one existed for the identifier/provider'), (200, 'No provider name'), (300, 'No passport found and no account created'), (301, 'Passport found but no account created')], verbose_name='code')),
				('message_id', models.PositiveIntegerField(db_index=True, help_text='The number quoted to the user', verbose_name='message ID')),
				('provider', models.CharField(blank=True, max_length=100, verbose_name='provider')),
				('user_identifier', models.CharField(blank=True, help_text='Identifier of the user at the provider (best effort)', max_length=255, verbose_name='user identifier')),
				('created', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='created')),
			],
			options={
				'verbose_name': 'login failure',
				'verbose_name_plural': 'login failures',
				'ordering': ('-created',),
			},
		),
		migrations.CreateModel(
			name='OktaGroup',
			fields=[
				('group', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='okta', serialize=False, to='auth.group', verbose_name='group')),
				('is_okta_group', models.BooleanField(default=True, help_text='The group comes from Okta', verbose_name='Okta group')),
				('last_assigned', models.DateTimeField(blank=True, help_text='The last time a login reported this group', null=True, verbose_name='last assigned')),
			],
			options={
				'verbose_name': 'okta group',
				'verbose_name_plural': 'okta groups',
			},
		),
		migrations.CreateModel(
			name='Passport',
			fields=[
				('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
				('identifier', models.CharField(help_text='Unique identifier of the user at the provider', max_length=255, verbose_name='identifier')),
				('provider', models.CharField(help_text='Name of the OAuth provider', max_length=100, verbose_name='provider')),
				('created', models.DateTimeField(auto_now_add=True, verbose_name='created')),
				('account', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='passports', to=settings.AUTH_USER_MODEL, verbose_name='account')),
			],
			options={
				'verbose_name': 'passport',
				'verbose_name_plural': 'passports',
				'constraints': [models.UniqueConstraint(fields=('identifier', 'provider'), name='okta_login_passport_unique_identity')],
			},
		),
	]
