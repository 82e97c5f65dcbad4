from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Global Limiter instance to be imported by controllers.
# No default limits: only the credential endpoints are throttled, so health
# probes and the Prometheus scraper are never rate-limited.
# Storage and the enabled flag are applied per app in main.create_app.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
)

# Per remote address, applied to register and login
AUTH_RATE_LIMIT = "10 per minute"
