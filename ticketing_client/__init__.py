"""Seat-map booking client for the ticketing platform."""

__version__ = "1.0.0"
