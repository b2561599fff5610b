"""
Configuration for the auth module.

Values come from the shared settings object; nothing here reads the
environment directly.
"""

from blog_platform.config import settings

# bcrypt cost factor used for new digests; existing digests keep their own.
BCRYPT_ROUNDS: int = settings.BCRYPT_ROUNDS

# Realm advertised in the WWW-Authenticate challenge.
REALM: str = "blog"
