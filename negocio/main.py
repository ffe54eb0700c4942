"""
FastAPI Application Entry Point - Negocio dashboard
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.sessions import SessionMiddleware

from negocio.config import settings
from negocio.database import SessionLocal, init_db
from negocio.exceptions import NotAuthenticated
from negocio.api import auth, customers, dashboard, health, products, sales
from negocio.services.auth_service import AuthService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Negocio",
    description="Business management dashboard for customers, products and sales",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Signed session cookie holding the user id
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(customers.router)
app.include_router(products.router)
app.include_router(sales.router)

# Prometheus metrics
Instrumentator().instrument(app).expose(app)


@app.exception_handler(NotAuthenticated)
async def redirect_to_sign_in(request: Request, exc: NotAuthenticated):
    return RedirectResponse("/sign-in", status_code=status.HTTP_303_SEE_OTHER)


@app.on_event("startup")
def startup_event():
    """Create tables and the operator account on startup"""
    logger.info(f"Starting {settings.SERVICE_NAME}...")
    init_db()
    logger.info("✓ Database initialized")

    db = SessionLocal()
    try:
        if AuthService(db).ensure_user(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD):
            logger.info(f"✓ Operator account: {settings.ADMIN_EMAIL}")
    finally:
        db.close()

    logger.info(f"✓ {settings.SERVICE_NAME} is running on port {settings.SERVICE_PORT}")


@app.on_event("shutdown")
def shutdown_event():
    """Cleanup on shutdown"""
    logger.info(f"Shutting down {settings.SERVICE_NAME}...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT)
