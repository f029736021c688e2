"""WSGI entrypoint for Gunicorn.

Usage:
  gunicorn -w 2 -b 0.0.0.0:8000 wsgi:app

With the file backend keep a single worker process per data file; appends are
serialized by an in-process lock only.
"""

from pension_lottery import create_app

app = create_app()
