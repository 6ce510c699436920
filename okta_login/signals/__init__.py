#python
"""
This module defines the Django signals sent by the Okta login.

Receivers shouldn't return anything, and their errors never break a login: the signals are sent "robustly" and the outcome of every receiver is logged.
"""

from logging import getLogger

from django.dispatch import Signal

LOGGER = getLogger(__name__)

okta_account_created = Signal()
okta_account_unlinked = Signal()
okta_group_created = Signal()
okta_login_rejected = Signal()


def send_and_report(signal, signal_text, sender, **kwargs):
	"""Send a signal and report
	Sends the signal with "send_robust" and logs what every receiver did with it.

	:param signal: the signal to send
	:type signal: Signal
	:param signal_text: a short description of the signal, for the logs
	:type signal_text: str
	:param sender: the sender of the signal
	:type sender: Any
	:param kwargs: the signal arguments
	:type kwargs: Any
	:return: the receivers results
	:rtype: list[tuple]
	"""

	results = signal.send_robust(sender=sender, **kwargs)
	for receiver, result in results:
		receiver = '.'.join((receiver.__module__, receiver.__qualname__))
		if isinstance(result, Exception):
			LOGGER.error('Receiver "%s" failed while processing the "%s" signal: %s', receiver, signal_text, result)
		elif result:
			LOGGER.warning('Receiver "%s" returned a value for the "%s" signal, discarding: %s', receiver, signal_text, result)
		else:
			LOGGER.debug('Receiver "%s" processed the "%s" signal.', receiver, signal_text)
	return results
