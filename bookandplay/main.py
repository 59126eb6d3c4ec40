from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from bookandplay.api.routes import availability, bookings, special_occasions, users, venues
from bookandplay.core.exceptions import BookingError, StorageUnavailableError

# ⭐ Import logging system
from bookandplay.core.logging_config import get_logger

logger = get_logger()

app = FastAPI(
    title="BookAndPlay API",
    version="1.0.0",
    description="Sports venue slot availability, booking and pricing"
)


# ⭐ Request Logging Middleware
@app.middleware("http")
async def log_requests(request, call_next):
    logger.info(f"REQUEST: {request.method} {request.url}")

    try:
        response = await call_next(request)
        logger.info(f"RESPONSE: {response.status_code} {request.url}")
        return response

    except Exception as e:
        logger.error(f"ERROR: {request.url} -> {str(e)}")
        raise e


# ⭐ Domain errors -> one user-visible message
@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {request.url} -> {exc.message}")
    else:
        logger.info(f"{exc.code}: {request.url} -> {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code, "retryable": exc.retryable},
    )


@app.exception_handler(OperationalError)
async def storage_error_handler(request: Request, exc: OperationalError):
    logger.error(f"Storage unavailable: {request.url} -> {exc}")
    err = StorageUnavailableError()
    return JSONResponse(
        status_code=err.status_code,
        content={"detail": err.message, "error": err.code, "retryable": err.retryable},
    )


# ⭐ CORS (mobile client + web dashboard)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------- ROUTERS REGISTER ORDER MATTERS --------
app.include_router(users.router)
app.include_router(venues.router)
app.include_router(special_occasions.router)
app.include_router(availability.router)
app.include_router(bookings.router)


@app.get("/", tags=["Root"])
def root():
    return {"message": "Backend running successfully"}
