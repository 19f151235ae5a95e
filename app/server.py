"""
Club Manager - FastAPI web server
Rosters, payments, events and match statistics

Data source: Supabase
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from dotenv import load_dotenv

from app.club import club_router, LedgerError, PersistenceError, RecordNotFound
from app.config import get_settings

# .env
load_dotenv()

# FastAPI app
app = FastAPI(
    title="Club Manager",
    description="Gestion de club sportif : effectifs, paiements, calendrier, statistiques",
    version="1.0.0"
)

app.include_router(club_router, prefix="/api")


# ==================== Error mapping ====================

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(RecordNotFound)
async def not_found_handler(request: Request, exc: RecordNotFound):
    return JSONResponse(status_code=404, content={"detail": f"Introuvable : {exc}"})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    # reported once, the operator retries
    return JSONResponse(
        status_code=502,
        content={"detail": "Une erreur est survenue lors de l'enregistrement"}
    )


# ==================== Lifecycle ====================

@app.on_event("startup")
async def startup_event():
    settings = get_settings()
    logger.info(f"✅ Server started - {settings.club_name} (test_mode={settings.test_mode})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Server stopped")


@app.get("/api/status")
async def api_status():
    settings = get_settings()
    return {
        "club": settings.club_name,
        "data_source": "supabase",
        "configured": bool(settings.supabase_url and settings.supabase_key),
    }


# ==================== Run ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
