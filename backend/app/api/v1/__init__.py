from . import (
    auth_router,
    expenses_router,
    people_router,
    loans_router,
    dashboard_router,
)

__all__ = [
    "auth_router",
    "expenses_router",
    "people_router",
    "loans_router",
    "dashboard_router",
]
