"""In-memory FastAPI stand-in for the ticketing backend."""

from .app import create_app
from .state import DEMO_SEAT_MAP, MockBackend

__all__ = ["create_app", "MockBackend", "DEMO_SEAT_MAP"]
