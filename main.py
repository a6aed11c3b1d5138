"""Application entry point for the Meal Subscription API.

Defines the FastAPI app, middleware, exception handlers and includes the API
routers from the `api` package. The `lifespan` handler initializes the DB
on startup.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Depends, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import settings
from core.csrf import generate_csrf_token, set_csrf_cookie
from core.error_handlers import register_exception_handlers
from core.exceptions import DatabaseError
from core.logger import get_logger
from database import init_db
from database.deps import get_db_read
from api.auth import router as auth_router
from api.users import router as users_router
from api.meal_plans import router as meal_plans_router
from api.subscriptions import router as subscriptions_router
from api.admin import router as admin_router
from api.testimonials import router as testimonials_router

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Fastapi lifespan context: initialize resources before serving requests."""
    init_db()
    yield


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests and their responses."""
    logger.info("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response
    except Exception:
        logger.exception("Request error: %s %s", request.method, request.url.path)
        raise


@app.get("/health")
def health(db: Session = Depends(get_db_read)):
    """Return health status, database connectivity and enabled features.

    Raises:
        DatabaseError: If the database cannot be reached.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed")
        raise DatabaseError("Database health check failed", operation="health_check")

    return {
        "status": "OK",
        "database": "connected",
        "version": settings.app_version,
        "timestamp": datetime.utcnow().isoformat(),
        "security": {
            "authentication": "JWT bearer tokens with argon2 password hashing",
            "authorization": "Role-based access control",
            "csrfProtection": "Double-submit cookie pattern" if settings.csrf_enabled else "disabled",
            "passwordPolicy": "Minimum 8 chars with upper, lower, digit and special character",
        },
        "features": {
            "authentication": True,
            "mealPlans": True,
            "subscriptions": True,
            "testimonials": True,
            "adminPanel": True,
        },
    }


@app.get("/csrf-token")
def csrf_token(response: Response):
    """Issue a CSRF token and mirror it in the `csrfToken` cookie."""
    token = generate_csrf_token()
    set_csrf_cookie(response, token)
    return {"csrfToken": token, "message": "CSRF token set in cookie"}


# include routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(meal_plans_router)
app.include_router(subscriptions_router)
app.include_router(admin_router)
app.include_router(testimonials_router)


if __name__ == "__main__":
    # Allow starting the app via `python ./main.py`
    try:
        import uvicorn
    except ImportError as exc:
        raise RuntimeError("uvicorn is required to run the app. Install with `pip install uvicorn[standard]`. Error: %s" % exc)

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
