"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Route-level authorization is applied at the include_router level
using FastAPI's dependencies parameter. The authentication gate never
rejects a request itself; protected routers do that by requiring an
identity. Health and auth routers are open.
"""

from fastapi import APIRouter, Depends

from fittrack.api.auth import router as auth_router
from fittrack.api.health import router as health_router
from fittrack.api.workouts import router as workouts_router
from fittrack.auth.dependencies import get_current_identity

# All protected routers require authentication
_auth = [Depends(get_current_identity)]

api_router = APIRouter()

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
api_router.include_router(workouts_router, tags=["workouts"], dependencies=_auth)
