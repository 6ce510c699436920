#python
"""
URL patterns for the standalone django-okta-login site.
"""

from django.contrib import admin
from django.urls import path

urlpatterns = [
	path('admin/', admin.site.urls),
]
