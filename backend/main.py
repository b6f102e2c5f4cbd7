"""
FastAPI application entry point
"""
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.api.v1 import auth, resumes
from backend.app.api.v1.resume_blocks import include_resume_block_routers
from backend.app.core.config import settings
from backend.app.core.dependencies import get_db
from backend.app.core.exceptions import AppError, Internal, Unauthenticated
from backend.app.core.logging_config import setup_logging
from backend.app.db.base import Base, utcnow
from backend.app.db.session import engine
from backend.app.schemas.common import envelope

# Import models so they register with Base.metadata
import backend.app.models  # noqa: F401

logger = setup_logging()

# Create database tables
try:
    Base.metadata.create_all(bind=engine)
except SQLAlchemyError:
    logger.exception("Database schema creation failed")

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Resume building blocks, composed resumes and account sessions",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(success=False, message=exc.message, errors=exc.errors),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        msg = err.get("msg", "Invalid value").removeprefix("Value error, ")
        errors.append(f"{loc}: {msg}" if loc else msg)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope(success=False, message="Validation error", errors=errors),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope(success=False, message=Internal().message),
    )


# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["authentication"])
include_resume_block_routers(app.router)
app.include_router(resumes.router, prefix="/api/resumes", tags=["resumes"])


@app.get("/")
def read_root():
    """Root endpoint"""
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "timestamp": utcnow().isoformat(),
    }


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint - 503 when the database cannot be reached"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "message": "Database connection failed",
                "timestamp": utcnow().isoformat(),
                "error": str(e),
            },
        )
    return {"status": "healthy", "message": "Server is running", "timestamp": utcnow().isoformat()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
