import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from llm_maps.core.config import settings
from llm_maps.core.exceptions import InvalidApiKey, InvalidInput
from llm_maps.core.llm_providers import OpenWebUIProvider
from llm_maps.core.logger import logs
from llm_maps.repos.cache_repo import ResponseCache
from llm_maps.routes.maps_route import router as maps_router
from llm_maps.services.intent_service import IntentResolver
from llm_maps.services.places_service import PlacesService
from llm_maps.services.search_service import SearchOrchestrator


def build_orchestrator() -> SearchOrchestrator:
    """Wire the services once per process; routes receive them through Depends."""
    cache = ResponseCache(ttl_seconds=settings.CACHE_TTL, max_entries=settings.CACHE_MAX_ENTRIES)
    provider = OpenWebUIProvider(
        base_url=settings.OPEN_WEBUI_BASE_URL,
        model=settings.OPEN_WEBUI_MODEL,
        api_key=settings.OPEN_WEBUI_API_KEY,
        timeout=settings.LLM_TIMEOUT,
        probe_timeout=settings.LLM_PROBE_TIMEOUT
    )
    return SearchOrchestrator(
        intent_resolver=IntentResolver(provider, cache=cache),
        places_service=PlacesService(cache=cache)
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.search_orchestrator = build_orchestrator()
    logs.log(logging.INFO, "LLM Maps Backend started")
    yield
    logs.log(logging.INFO, "LLM Maps Backend stopped")


app = FastAPI(title="LLM Maps Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(maps_router)


# --- Request Logging ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    logs.log(logging.INFO, f"{request.method} {request.url.path}")
    return await call_next(request)


# --- Error Handling ---
@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    logs.log(logging.INFO, f"Validation error on {exc.field}: {exc.reason}")
    return JSONResponse(
        status_code=400,
        content={"error": "Validation Error", "message": exc.reason, "field": exc.field}
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = str(first.get("loc", ["", "body"])[-1])
    return JSONResponse(
        status_code=400,
        content={"error": "Validation Error", "message": first.get("msg", "Invalid request"), "field": field}
    )

@app.exception_handler(InvalidApiKey)
async def invalid_api_key_handler(request: Request, exc: InvalidApiKey):
    return JSONResponse(status_code=401, content={"error": "Invalid API key"})

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Route not found", "path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logs.log(logging.ERROR, f"Global error handler: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if settings.is_development else "Something went wrong"
        }
    )


# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to LLM Maps API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "search": "/api/maps/search",
            "directions": "/api/maps/directions",
            "place_details": "/api/maps/places/{placeId}",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check():
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "LLM Maps Backend"
    }

# --- Client Config ---
@app.get("/api/config")
async def client_config():
    return {"googleMapsClientKey": settings.GOOGLE_MAPS_CLIENT_KEY}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("llm_maps.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
