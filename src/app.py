"""Club Supply FastAPI application.

Web server that processes commands synchronously via HTTP. Every request
runs inside the clubsupply domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# PROTEAN_ENV picks the domain.toml overlay:
#   - unset / "development" / "test" -> in-memory stores
#   - "production"                   -> PostgreSQL via DATABASE_URL
from clubsupply.api import create_app
from clubsupply.domain import clubsupply

clubsupply.init()

app = create_app(clubsupply)
