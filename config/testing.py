from ._base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
