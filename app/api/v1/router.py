from fastapi import APIRouter

from app.api.v1.endpoints.health import router as health_router
from app.api.v1.endpoints.apartments import router as apartments_router
from app.api.v1.endpoints.user_listings import router as user_listings_router
from app.api.v1.endpoints.bookmarks import router as bookmarks_router
from app.api.v1.endpoints.admin import router as admin_router
from app.api.v1.endpoints.notifications import router as notifications_router
from app.api.v1.endpoints.internal import router as internal_router
from app.api.v1.endpoints.me import router as me_router


router = APIRouter(prefix="/v1")
router.include_router(health_router, tags=["health"])
router.include_router(apartments_router, tags=["apartments"])
router.include_router(user_listings_router, tags=["user-listings"])
router.include_router(bookmarks_router, tags=["bookmarks"])
router.include_router(admin_router, tags=["admin"])
router.include_router(notifications_router, tags=["notifications"])
router.include_router(internal_router, tags=["internal"])
router.include_router(me_router, tags=["me"])
