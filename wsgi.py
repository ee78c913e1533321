"""
Production WSGI entry point.

Gunicorn loads `application` from here; see gunicorn.conf.py for worker
settings:

    gunicorn -c gunicorn.conf.py wsgi:application

FLASK_SECRET_KEY must be set, and DATABASE_URL should point at the
production database.
"""

from ignition.app import create_app

application = create_app("production")
