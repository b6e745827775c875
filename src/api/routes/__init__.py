from fastapi import FastAPI

from . import audit_logs, auth, commissions, dashboard, goals, health, settings, users


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(settings.router)
    app.include_router(goals.router)
    app.include_router(commissions.router)
    app.include_router(dashboard.router)
    app.include_router(users.router)
    app.include_router(audit_logs.router)
