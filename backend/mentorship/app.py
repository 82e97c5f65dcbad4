import logging

from .core.config import load_settings
from .main import create_app

logger = logging.getLogger(__name__)

settings = load_settings()

# Create Flask app (WSGI entry point: mentorship.app:app)
app = create_app(settings)

if __name__ == "__main__":
    # Development server only; production runs behind a WSGI server
    logger.info(
        "Starting development server", extra={"context": {"port": settings.port}}
    )
    app.run(host="0.0.0.0", port=settings.port)
