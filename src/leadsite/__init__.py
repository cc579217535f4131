"""Lead-capture API for the company marketing site.

This package contains the registration, contact and admin endpoints together with
the database, configuration and logging infrastructure they run on.
"""

__version__ = "0.1.0"
