"""
FastAPI routers.

Each module exposes an APIRouter included by the application factory
(gateway.app). The resources router is generic over collection names, so it
must be included after any router with fixed top-level paths.
"""
