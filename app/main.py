# /exam-portal/app/main.py

# --- Core FastAPI Imports ---
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

# --- Application-specific Router Imports ---
from .routers import auth_router, exam_router, admin_router

# --- Database & Service Imports for Startup Logic ---
from .db.base import Base
from .db.database import engine, SessionLocal
from .services import config_service, user_service
from .services.database_service import DatabaseService


def initialize_database():
    """Creates missing tables, then seeds the default settings and the bootstrap admin."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        db = DatabaseService(session)
        config_service.seed_defaults(db)
        user_service.ensure_default_admin(db)
    finally:
        session.close()


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # This code runs ONCE when the application starts up.
    initialize_database()
    yield


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Exam Portal API",
    description="Online multiple-choice exam portal: per-student papers, scoring and question-bank ingestion.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Router Inclusion ---
app.include_router(auth_router.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(exam_router.router, prefix="/api/exam", tags=["Exam"])
app.include_router(admin_router.router, prefix="/api/admin", tags=["Admin"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Exam Portal is running!", "version": app.version}
