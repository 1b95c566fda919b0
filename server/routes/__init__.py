# server/routes/__init__.py
from .category_routes import router as category_router, location_router
from .health_routes import router as health_router
from .remark_routes import router as remark_router
from .ticket_routes import router as ticket_router


def include_routes(app):
    """Include all routes in the FastAPI app."""
    app.include_router(ticket_router)
    app.include_router(remark_router)
    app.include_router(category_router)
    app.include_router(location_router)
    app.include_router(health_router)
