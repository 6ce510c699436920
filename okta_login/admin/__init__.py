#python
"""
Okta Login Admin
"""

from django.contrib.admin import site

from ..models import LoginFailure, OktaAccount, Passport
from .options import LoginFailureModelAdmin, OktaAccountModelAdmin, PassportModelAdmin


site.register(OktaAccount, OktaAccountModelAdmin)
site.register(Passport, PassportModelAdmin)
site.register(LoginFailure, LoginFailureModelAdmin)
