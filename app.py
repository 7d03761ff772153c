import os
import time
from functools import lru_cache
from typing import Optional
from fastapi import FastAPI, Request, Depends
from fastapi.responses import JSONResponse
from loguru import logger
from dotenv import load_dotenv

# Import our modules
from graph.pipeline import ImportPipeline
from tools.auth import AuthContext, get_auth
from tools.errors import InternalError, InvalidRequest, Unauthorized
from tools.integration import IntegrationAppClient
from tools.record_store import RecordStore

VERSION = "1.0.0"

# Load environment variables
load_dotenv()

# Configure logging
logger.add(os.getenv("LOG_FILE", "logs/app.log"), rotation="1 day", retention="7 days", level="INFO")

# Initialize FastAPI app
app = FastAPI(
    title="Integration Records Importer",
    description="Imports records from connected external systems via Integration.app",
    version=VERSION
)

@lru_cache(maxsize=1)
def get_record_store() -> RecordStore:
    """Shared record store, connected on first use."""
    return RecordStore()

def get_tenant_record_store(auth: AuthContext = Depends(get_auth)) -> RecordStore:
    """Record store for an authenticated customer; nothing is touched for anonymous calls."""
    if not auth.customer_id:
        raise Unauthorized()
    return get_record_store()

def get_integration_client(auth: AuthContext = Depends(get_auth)):
    """Integration.app client for the calling customer."""
    client = IntegrationAppClient(auth.customer_id, auth.customer_name)
    try:
        yield client
    finally:
        client.close()

@app.get("/api/records/import")
def import_records(
    action: Optional[str] = None,
    instanceKey: Optional[str] = None,
    auth: AuthContext = Depends(get_auth),
    client=Depends(get_integration_client),
    store: RecordStore = Depends(get_tenant_record_store),
):
    """
    Import all records of an action for the calling customer.

    Query parameters:
        action: action key, e.g. "get-equipment" or "get-objects"
        instanceKey: custom object instance key, required for custom actions
    """
    pipeline = ImportPipeline(client, store)
    return pipeline.run(action, instanceKey, auth.customer_id)

@app.get("/health")
def health(store: RecordStore = Depends(get_record_store)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": VERSION,
        "services": {
            "redis": "connected" if store.is_connected() else "disconnected",
            "workflow": "ready"
        }
    }

# Error handlers
@app.exception_handler(Unauthorized)
async def unauthorized_handler(request: Request, exc: Unauthorized):
    return JSONResponse(status_code=401, content={"error": "Unauthorized"})

@app.exception_handler(InvalidRequest)
async def invalid_request_handler(request: Request, exc: InvalidRequest):
    logger.warning(f"Invalid import request: {exc.message}")
    return JSONResponse(status_code=400, content={"error": exc.message})

@app.exception_handler(InternalError)
async def internal_error_handler(request: Request, exc: InternalError):
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "message": exc.message}
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error"}
    )

if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Integration Records Importer")

    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        log_level="info"
    )
