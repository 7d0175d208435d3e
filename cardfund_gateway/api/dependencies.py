"""Dependency injection for FastAPI endpoints"""

from datetime import date
from fastapi import Request
from cardfund_gateway.config import settings
from cardfund_gateway.domain.models import SimulationPolicy


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_simulation_policy() -> SimulationPolicy:
    """Provide the configured affordability policy"""
    return settings.simulation_policy()


def get_today() -> date:
    """Reference date for balances and simulations"""
    return date.today()
