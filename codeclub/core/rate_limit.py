"""
Shared slowapi limiter, keyed by the caller's Authorization header.
"""
from slowapi import Limiter

from codeclub.core import config
from codeclub.features.users.dependencies import get_authorization_header


limiter = Limiter(key_func=get_authorization_header, enabled=config.RATE_LIMIT_ENABLED)
