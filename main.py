from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from database import engine, Base
from config import get_settings
from app_logger import setup_logging, get_logger
from errors import FinanceError

# --- IMPORT MODELS (registers tables on Base) ---
from models.masters import ClassMaster, Parent
from models.students import Student
from models.fee_models import Payment, FinanceSummary

# --- IMPORT ROUTERS (APIs) ---
from routers import dashboard, masters, students, fee_ledger

settings = get_settings()
setup_logging(settings.log_level)
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- CREATE DATABASE TABLES ---
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))
    yield


app = FastAPI(title=settings.app_title, lifespan=lifespan)

# ==========================================
# STAFF GATE
# ==========================================
@app.middleware("http")
async def staff_gate(request: Request, call_next):
    # Sign-in lives with the identity provider; this only checks the shared token
    token_required = get_settings().staff_token
    if token_required and request.url.path.startswith("/api/v1"):
        token = request.cookies.get("user_token") or request.headers.get("X-Staff-Token")
        if token != token_required:
            return JSONResponse(status_code=401, content={"detail": "Staff login required"})
    return await call_next(request)

# ==========================================
# CORS MIDDLEWARE (dashboard frontend)
# ==========================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==========================================
# ERROR MAPPING
# ==========================================
@app.exception_handler(FinanceError)
async def finance_error_handler(request: Request, exc: FinanceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

# --- REGISTER ROUTERS ---
app.include_router(dashboard.router)
app.include_router(masters.router)
app.include_router(students.router)
app.include_router(fee_ledger.router)


@app.get("/healthz")
def healthz():
    return {"status": "ok"}
