"""API routes."""

from payday.api.routes.health import router as health_router
from payday.api.routes.leaves import router as leaves_router
from payday.api.routes.salary_runs import router as salary_runs_router

__all__ = ["health_router", "leaves_router", "salary_runs_router"]
