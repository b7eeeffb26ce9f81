import logging

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from cv_engine.api.routes.extract import router as extract_router
from cv_engine.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    description="Layout-aware extraction of structured CV data (contact details, experience, education, skills and more) from text-layer PDFs",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.include_router(extract_router)

@app.get("/", tags=["health"])
def root():
    return {"service": "cv-engine", "status": "running"}

@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}

def custom_openapi():
    """Generate OpenAPI schema with custom settings."""
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="CV Engine API",
        version="0.1.0",
        description="CV structure extraction with section detection and confidence scoring",
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi
