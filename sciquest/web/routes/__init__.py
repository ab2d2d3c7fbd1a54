from .auth import auth_router
from .health import health_router
from .profile import profile_router
from .student_signup import student_signup_router

__all__ = ["auth_router", "health_router", "profile_router", "student_signup_router"]
