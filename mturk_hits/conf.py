"""
Configuration parameters for the HIT client.

Everything necessary is spread out among:
    conf.py     <--- configurable params, read from the environment
    _globals.py <--- global parameters, shouldn't need changing too often
"""

import os

from mturk_hits._globals import *  # i know this is redundant but WHATEVER.


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


"""
For debugging
"""
# ensure that unless told otherwise, you're using the mturk sandbox.
MTURK_SANDBOX = _env_flag('MTURK_SANDBOX', True)

"""
AWS STUFF
"""
# if these are unset, the credentials are resolved by botocore (environment,
# ~/.aws/credentials, instance profile, ...)
MTURK_ACCESS_ID = os.environ.get('MTURK_ACCESS_ID')
MTURK_SECRET_KEY = os.environ.get('MTURK_SECRET_KEY')

if MTURK_SANDBOX:
    MTURK_HOST = os.environ.get('MTURK_HOST', MTURK_SANDBOX_HOST)
else:
    MTURK_HOST = os.environ.get('MTURK_HOST', MTURK_REGULAR_HOST)

# how long to wait on MTurk, in seconds
MTURK_TIMEOUT = float(os.environ.get('MTURK_TIMEOUT', 60))

"""
LOGGING
"""
LOG_LOCATION = os.environ.get('MTURK_LOG_FILE')
