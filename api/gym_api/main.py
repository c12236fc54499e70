from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import asyncio
import os
import time
from dotenv import load_dotenv
from loguru import logger

# Load environment variables before any module reads them
load_dotenv()

from .core.logging import setup_logging, get_request_logger
from .core.database import check_db_connection
from .core.exceptions import setup_exception_handlers
from .core.gate import setup_authorization_gate
from .core.rate_limit import DailyRateLimiter, run_sweeper
from .core.security import get_secret_key
from .routers import admin, auth, members, pages, plans, trainer_portal, trainers

APP_NAME = "Gym Management API"
APP_VERSION = "1.0.0"

# Initialize logging
setup_logging()

# Refuse to start without a signing key
get_secret_key()


@asynccontextmanager
async def lifespan(app: FastAPI):
    sweeper = asyncio.create_task(run_sweeper(app.state.rate_limiter))
    logger.info("Rate limiter sweeper started")
    try:
        yield
    finally:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
        logger.info("Rate limiter sweeper stopped")


# Create FastAPI app
app = FastAPI(
    title=APP_NAME,
    description="Gym management API: members, trainers, admin notifications and AI workout plans",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.rate_limiter = DailyRateLimiter()

# Setup exception handlers
setup_exception_handlers(app)

# Authorization gate runs before every handler
setup_authorization_gate(app)


# Registered after the gate so it wraps it and also logs redirects/rejections
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """
    Middleware to add processing time to response headers
    """
    start_time = time.time()
    # Context is bound, never passed as format kwargs: paths may contain braces
    request_logger = get_request_logger().bind(path=request.url.path, method=request.method)

    request_logger.bind(
        client=request.client.host if request.client else "unknown"
    ).info(f"Request received: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = f"{process_time:.4f} sec"

    request_logger.bind(
        status_code=response.status_code,
        process_time=f"{process_time:.4f} sec"
    ).info(f"Response sent: {response.status_code}")

    return response


# Setup CORS outermost so preflight requests never reach the gate
origins = os.getenv("CORS_ORIGINS", "http://localhost,http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers; the trainer portal goes before the admin trainer CRUD so
# /api/trainers/members is not captured by /api/trainers/{trainer_id}
app.include_router(auth.router)
app.include_router(trainer_portal.router)
app.include_router(trainers.router)
app.include_router(members.router)
app.include_router(admin.router)
app.include_router(plans.router)
app.include_router(pages.router)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint with API info"""
    return {
        "app": APP_NAME,
        "version": APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "admin": "/admin/login",
        "trainer": "/trainer/login",
    }


@app.get("/health", tags=["system"])
async def health_check():
    """
    Health check endpoint
    """
    db_healthy = await check_db_connection()

    if not db_healthy:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "message": "Database connection failed"}
        )

    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    PORT = int(os.getenv("API_PORT", "8000"))

    logger.info(f"Starting API server on port {PORT}")

    uvicorn.run(
        "gym_api.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=False,
        log_level="info"
    )
