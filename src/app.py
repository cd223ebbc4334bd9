"""Commerce FastAPI application.

The domain is initialized at module level so uvicorn workers share it.
PROTEAN_ENV selects the domain.toml overlay (``production`` switches the
default database to PostgreSQL).

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from commerce.api.app import create_app
from commerce.config import get_settings
from commerce.domain import commerce
from commerce.utils.logging import configure_logging

settings = get_settings()
configure_logging(settings)

commerce.init()

app = create_app(commerce, settings)
