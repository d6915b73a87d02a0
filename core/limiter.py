"""
core/limiter.py   Rate Limiting
==========================================================
Uses Flask-Limiter (memory storage for dev, Redis in production).
Exceeded limits raise werkzeug's 429 TooManyRequests, which flows into
the error-handling stage like every other upstream error.
"""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Singleton   init_app() called from create_app(); limits come from RATELIMIT_DEFAULT
limiter = Limiter(key_func=get_remote_address)
