#python
"""
Exceptions raised at the edges of the Okta login flow.
"""


class OktaLoginError(Exception):
	"""Base error
	Every error raised by this app inherits from this one.
	"""


class LoginRejected(OktaLoginError):
	"""Login rejected
	The reconciliation of an Okta identity ended in a rejection. The message is the generic support message (with the correlation id) and the rejection itself is available in the "rejection" attribute.
	"""

	def __init__(self, rejection):
		super().__init__(rejection.message)
		self.rejection = rejection


class AccountLockedOut(OktaLoginError):
	"""Account too old
	The account hasn't been synchronized from Okta recently enough to be allowed in.
	"""
