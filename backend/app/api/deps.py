"""FastAPI dependencies: DB session from the app's session factory."""
from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session


def get_db(request: Request) -> Generator[Session, None, None]:
    """Get database session. The factory is built at startup and kept on app.state."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
