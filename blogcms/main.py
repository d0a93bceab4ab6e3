# blogcms/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from blogcms.api.error_handlers import register_exception_handlers
from blogcms.api.routers import api_keys, auth, categories, galleries, home, media, posts
from blogcms.core.config import settings
from blogcms.core.logging import get_logger, setup_logging
from blogcms.core.metrics import export_metrics
from blogcms.initial_data import create_initial_admin_user
from blogcms.middleware import ObservabilityMiddleware, PayloadLimitMiddleware, SecurityHeadersMiddleware

# --- Models registration (necesario para que Alembic los detecte) ---
import blogcms.models.item  # noqa: F401

logger = get_logger(__name__)

# --- Metadatos de la API para la documentación ---
TAGS_METADATA = [
    {"name": "auth", "description": "Login, logout y usuario actual."},
    {"name": "categories", "description": "Categorías que agrupan galerías y posts."},
    {"name": "galleries", "description": "Galerías de imágenes, consultables por categoría."},
    {"name": "posts", "description": "Artículos del blog por idioma."},
    {"name": "media", "description": "Biblioteca de media (Cloudinary)."},
    {"name": "home", "description": "Contenido de la portada."},
    {"name": "api-keys", "description": "Claves para integraciones de escritura."},
]


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    await create_initial_admin_user()
    logger.info("Application started", extra={"project": settings.PROJECT_NAME})
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    description=(
        "API del blog personal.\n\n"
        "- **Lectura**: pública, sin autenticación.\n"
        "- **Escritura**: bearer token (login) o cabecera `X-API-Key`.\n\n"
        "Usa el botón **Authorize** para probar los endpoints protegidos."
    ),
    openapi_tags=TAGS_METADATA,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={"persistAuthorization": True, "displayRequestDuration": True},
)

# --- Middlewares ---
app.add_middleware(PayloadLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# --- Routers ---
app.include_router(auth.router, prefix=settings.API_V1_STR)
app.include_router(categories.router, prefix=settings.API_V1_STR)
app.include_router(galleries.router, prefix=settings.API_V1_STR)
app.include_router(posts.router, prefix=settings.API_V1_STR)
app.include_router(media.router, prefix=settings.API_V1_STR)
app.include_router(home.router, prefix=settings.API_V1_STR)
app.include_router(api_keys.router, prefix=settings.API_V1_STR)


# --- Configuración personalizada de OpenAPI ---
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        tags=TAGS_METADATA,
    )
    comps = openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})
    comps["ApiKeyAuth"] = {
        "type": "apiKey",
        "in": "header",
        "name": "X-API-Key",
        "description": "Clave creada en /api-keys; sólo para escritura.",
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}


@app.get("/metrics", include_in_schema=False)
def metrics():
    payload, content_type = export_metrics()
    return Response(content=payload, media_type=content_type)


# --- Endpoint raíz ---
@app.get("/", include_in_schema=False)
def root():
    return {"status": "ok", "docs_url": "/docs", "redoc_url": "/redoc"}
