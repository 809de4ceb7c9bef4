"""Hospital Lookup API - FastAPI Application"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException

from config import get_settings
from routers import hospital, debug


settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Hospital Lookup API",
    description="Maps hospital codes to hospital names from a Google spreadsheet",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(hospital.router, prefix="/api", tags=["Hospital"])
app.include_router(debug.router, prefix="/debug", tags=["Debug"])


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    """Render errors as {"error": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Bad query parameters are client errors."""
    messages = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.get("/healthz")
async def healthz():
    """Health check endpoint."""
    return {"ok": True}


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Root endpoint."""
    return "Hospital API is running"


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
