#!python
"""A setuptools based setup module.
"""

import setuptools

import okta_login

setuptools.setup(
	name = 'django-okta-login',
	version = okta_login.__version__,
	description = okta_login.__doc__.splitlines()[0],
	long_description = okta_login.__doc__.splitlines()[1],
	url = 'https://github.com/irvingleonard/django-okta-login',
	author = 'Irving Leonard',
	author_email = 'irvingleonard@gmail.com',
	license='BSD 2-Clause "Simplified" License',
	classifiers = [
		'Development Status :: 3 - Alpha',
		'Environment :: Web Environment',
		'Framework :: Django',
		'Intended Audience :: Developers',
		'License :: OSI Approved :: BSD License',
		'Natural Language :: English',
		'Operating System :: OS Independent',
		'Programming Language :: Python',
		'Programming Language :: Python :: 3',
		'Topic :: Internet :: WWW/HTTP',
		'Topic :: Internet :: WWW/HTTP :: Dynamic Content',
		'Topic :: System :: Systems Administration :: Authentication/Directory',
	],
	keywords = 'okta oauth oidc sso',

	install_requires = [
		'asgiref',
		'django>=4.2',
		'normalized-django-settings',
		'okta',
		'tqdm',
	],
	extras_require = {
		'test': [
			'pytest',
			'pytest-django',
		],
	},
	python_requires = '>=3.9',
	packages = setuptools.find_packages(exclude=['tests', 'tests.*']),
)
