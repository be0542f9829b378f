from bureau.routes.auth import router as auth_router
from bureau.routes.profiles import router as profiles_router
from bureau.routes.access_requests import router as access_requests_router
from bureau.routes.inquiries import router as inquiries_router
from bureau.routes.payment_settings import router as payment_settings_router
from bureau.routes.admin import router as admin_router

__all__ = [
    "auth_router", "profiles_router", "access_requests_router",
    "inquiries_router", "payment_settings_router", "admin_router",
]
