"""Reservations presentation layer."""

from reservations.presentation.routes import equipment_router, router

__all__ = ["equipment_router", "router"]
