"""Pytest plugin (loaded via -p before pytest-django reads settings): mirror the settings' test mode,
which base.py only enables for `manage.py test`."""

import os

_TEST_RATE = "10000/min"

os.environ.setdefault("LOG_LEVEL", "WARNING")
for _name in ("ANON", "USER", "AUTH", "CATALOG", "ENGAGEMENT", "WEBHOOK"):
    os.environ.setdefault(f"THROTTLE_{_name}_RATE", _TEST_RATE)
