"""API route modules."""
from haven.routes.agents import router as agents_router
from haven.routes.ai import router as ai_router
from haven.routes.analyze import router as analyze_router
from haven.routes.assets import router as assets_router
from haven.routes.canvas import router as canvas_router
from haven.routes.opengraph import router as opengraph_router
from haven.routes.search import router as search_router
from haven.routes.user import router as user_router

__all__ = [
    "agents_router",
    "ai_router",
    "analyze_router",
    "assets_router",
    "canvas_router",
    "opengraph_router",
    "search_router",
    "user_router",
]
