"""FastAPI application for epictrac"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from epictrac.api.epics import router as epics_router
from epictrac.api.issues import router as issues_router
from epictrac.api.schemas import ErrorResponse
from epictrac.storage.errors import MalformedRow, StoreUnavailable

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="epictrac API",
    description="Epic closure eligibility for a dependency-aware issue tracker",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Store failures every API route can report
store_error_responses = {
    500: {"model": ErrorResponse, "description": "A stored row could not be decoded"},
    503: {"model": ErrorResponse, "description": "The store could not answer"},
}

# Include API routers
app.include_router(epics_router, prefix="/api/epics", tags=["epics"], responses=store_error_responses)
app.include_router(issues_router, prefix="/api/issues", tags=["issues"], responses=store_error_responses)

@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.warning("Store unavailable for %s: %s", request.url.path, exc)
    error = ErrorResponse(error="store_unavailable", detail=str(exc))
    return JSONResponse(status_code=503, content=error.model_dump())

@app.exception_handler(MalformedRow)
async def malformed_row_handler(request: Request, exc: MalformedRow):
    logger.error("Malformed row for %s: %s", request.url.path, exc)
    error = ErrorResponse(error="malformed_row", detail=str(exc))
    return JSONResponse(status_code=500, content=error.model_dump())

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "epictrac-api"}

@app.on_event("startup")
async def startup_event():
    """Create the store tables on startup"""
    from epictrac.storage.database import initialize_database
    initialize_database()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8080)
