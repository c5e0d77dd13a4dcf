from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from app.config import settings
from app.api.v1 import (
    auth, customer_addresses, addresses, products, sellers, orders, delivery, ws
)
from app.api.v1 import admin_vendors, admin_products, admin_orders, admin_delivery, admin_delivery_areas
from app.middleware.security import SecurityHeadersMiddleware, TimingMiddleware
from app.utils.logging_config import configure_logging
import logging

configure_logging()
logger = logging.getLogger(__name__)

# Interactive docs only outside production
docs_url = "/docs" if settings.DEBUG else None
redoc_url = "/redoc" if settings.DEBUG else None

app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-vendor local delivery marketplace API",
    version=settings.APP_VERSION,
    docs_url=docs_url,
    redoc_url=redoc_url,
    openapi_url="/openapi.json" if settings.DEBUG else None
)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    from fastapi.openapi.utils import get_openapi

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    # Swagger UI: paste a bearer token instead of going through the password flow
    schemes = openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})
    schemes["Bearer"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
        "description": "JWT from POST /api/v1/auth/login"
    }
    for methods in openapi_schema.get("paths", {}).values():
        for operation in methods.values():
            if isinstance(operation, dict):
                for requirement in operation.get("security", []):
                    if "OAuth2PasswordBearer" in requirement:
                        requirement["Bearer"] = requirement["OAuth2PasswordBearer"]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# Security Middleware (add first)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(TimingMiddleware)

if settings.ENVIRONMENT == "production":
    origins = [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",") if origin.strip()]
    if not origins:
        logger.warning("No ALLOWED_ORIGINS set in production!")
else:
    origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time"],
)


def sanitize_error(error):
    """Convert validation error details to JSON-serializable values"""
    if isinstance(error, dict):
        return {k: sanitize_error(v) for k, v in error.items()}
    elif isinstance(error, (list, tuple)):
        return [sanitize_error(item) for item in error]
    elif isinstance(error, bytes):
        return error.decode('utf-8', errors='replace')
    elif isinstance(error, (str, int, float, bool, type(None))):
        return error
    return str(error)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "message": "Validation error",
            "error": {
                "code": "VALIDATION_ERROR",
                "details": sanitize_error(exc.errors())
            }
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "Internal server error",
            "error": {
                "code": "SERVER_ERROR",
                "details": str(exc) if settings.DEBUG else "An error occurred"
            }
        }
    )


# Customer, seller and delivery routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(customer_addresses.router, prefix="/api/v1/customer/addresses", tags=["Customer Addresses"])
app.include_router(addresses.router, prefix="/api/v1/addresses", tags=["Location"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(sellers.router, prefix="/api/v1/sellers", tags=["Sellers"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(delivery.router, prefix="/api/v1/delivery", tags=["Delivery"])

# Admin Routers
app.include_router(admin_vendors.router, prefix="/admin/vendors", tags=["Admin Vendors"])
app.include_router(admin_products.router, prefix="/admin/products", tags=["Admin Products"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(admin_delivery.router, prefix="/admin/delivery-persons", tags=["Admin Delivery"])
app.include_router(admin_delivery_areas.router, prefix="/admin/delivery-areas", tags=["Admin Delivery Areas"])

# Push channels
app.include_router(ws.router)


@app.get("/")
def root():
    return {
        "message": f"{settings.APP_NAME} is running",
        "version": settings.APP_VERSION,
        "docs": docs_url
    }


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME
    }
