#python
"""Login failure audit
Every rejected login gets a record with a random "message ID" that the user can quote to support. The user never sees the reason, only the generic support message and that number.
"""

from logging import getLogger
from secrets import randbelow

from django.utils.translation import gettext as _

from .models import FailureCodes, LoginFailure

LOGGER = getLogger(__name__)
MESSAGE_ID_RANGE = (100000, 999999)


def new_message_id():
	"""Random message ID
	A six digit number, easy enough to read over the phone.

	:return: the message ID
	:rtype: int
	"""

	low, high = MESSAGE_ID_RANGE
	return low + randbelow(high - low + 1)


def record_login_failure(code, provider='', user_identifier=''):
	"""Record a login failure
	Writes the audit record right away (it's part of the rejection, not an afterthought).

	:param code: the failure code
	:type code: FailureCodes
	:param provider: the provider name, if known
	:type provider: str
	:param user_identifier: the user identifier at the provider, if known
	:type user_identifier: str
	:return: the new record
	:rtype: LoginFailure
	"""

	code = FailureCodes(code)
	failure = LoginFailure.objects.create(
		code=code,
		message_id=new_message_id(),
		provider=provider or '',
		user_identifier=user_identifier or '',
	)
	LOGGER.warning('Okta login failed with code %s (%s) for %s@%s: #%s', code.value, code.label, user_identifier, provider, failure.message_id)
	return failure


def support_message(message_id=None):
	"""Support message
	The generic message shown to the user, with the message ID when there is one.

	:param message_id: the message ID of the failure
	:type message_id: int|None
	:return: the message
	:rtype: str
	"""

	message = _('Sorry, there was an issue signing you in. Please try again or contact support.')
	if message_id is None:
		return message
	return '{} (#{})'.format(message, message_id)
