"""Routers package."""

from . import (
    health,
    auth,
    jobs,
    candidates,
    applications,
    billing,
    analytics,
)
