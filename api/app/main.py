import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .log import configure_logging
from .routers import accounts, balance_history, customers, messages, transactions
from .store import DataSourceError

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

if not settings.supabase_url:
    logger.warning("SUPABASE_URL is not set; token issuer will not be checked")
if not settings.supabase_jwt_secret:
    logger.warning("SUPABASE_JWT_SECRET is not set; all authenticated requests will be rejected")

app = FastAPI(title=settings.app_name)

# CORS: allow web origin for dev
allowed_origins = {str(settings.app_url).rstrip("/"), "http://localhost:5173", "http://127.0.0.1:5173"}
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DataSourceError)
async def data_source_error_handler(request: Request, exc: DataSourceError):
    return JSONResponse(status_code=500, content={"detail": f"Failed to load {exc.resource} data"})


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "service": settings.app_name,
        "env": settings.app_env,
    }

# Routers
app.include_router(accounts.router)
app.include_router(transactions.router)
app.include_router(balance_history.router)
app.include_router(customers.router)
app.include_router(messages.router)
