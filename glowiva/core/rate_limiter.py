from slowapi import Limiter
from slowapi.util import get_remote_address

# Keyed by client address. create_app toggles `enabled` from settings.
limiter = Limiter(key_func=get_remote_address)
