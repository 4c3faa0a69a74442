from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import uvicorn

from app.core.config import settings
from app.exceptions import BookingPlatformError
from app.routers import bookings, catalog, notifications, payments, settlements

# Configure base logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("app")

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for golf, hotel and travel bookings with vendor approval, payments and settlements",
    version=settings.VERSION,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
app.include_router(payments.router, prefix="/payments", tags=["payments"])
app.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
app.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
app.include_router(catalog.router, prefix="/catalog", tags=["catalog"])


@app.get("/")
def read_root():
    return {"message": "Welcome to Golf Tourism API"}


@app.exception_handler(BookingPlatformError)
async def booking_platform_error_handler(request: Request, exc: BookingPlatformError):
    if exc.status_code >= 500:
        logger.error(
            "Request failed | path=%s | method=%s | error=%s",
            request.url.path,
            request.method,
            exc.detail,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request", "details": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
        for err in exc.errors()
    ]


# Global unhandled exception handler -> logs ERROR, never leaks internals
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error | path=%s | method=%s | client=%s",
        request.url.path,
        request.method,
        request.client.host if request.client else "unknown",
    )
    return JSONResponse(
        status_code=500, content={"success": False, "error": "Internal server error"}
    )


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
