"""
Main FastAPI application for the Locshare backend
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from bson.errors import InvalidId
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from locshare.errors import LocshareError, NotFound, ValidationFailure
from locshare.models import ApiResponse, LocationCreate
from locshare.utils import ConnectionHandle, DatabaseService

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

# Initialize services
connection = ConnectionHandle.from_settings(settings)
database = DatabaseService(connection)


def get_database() -> DatabaseService:
    """Dependency returning the process-wide database service"""
    return database


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    connection.close()


# Initialize FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=settings.api_description,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Answer preflight requests and stamp CORS headers on every response"""
    if request.method == "OPTIONS":
        response = Response(status_code=status.HTTP_200_OK)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


def error_response(status_code: int, message: str, error: Any = None, **extra) -> JSONResponse:
    body = ApiResponse(
        success=False,
        message=message,
        error=str(error) if error is not None else None,
        **extra,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        details.append(f"{field}: {err.get('msg')}")
    logger.info("Rejected %s %s: %s", request.method, request.url.path, "; ".join(details))
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid location data", "; ".join(details))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "Method not allowed"
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Not found"
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message)


router = APIRouter()


@router.post(
    "/location",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    response_model_exclude_none=True,
)
def create_location(body: LocationCreate, request: Request, db: DatabaseService = Depends(get_database)):
    """Store one capture record"""
    fields = body.model_dump()

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        fields["ip"] = forwarded_for.split(",")[0].strip()
    user_agent = request.headers.get("user-agent")
    if user_agent:
        fields["userAgent"] = user_agent

    logger.debug("Received location %s, %s", body.latitude, body.longitude)
    try:
        record = db.insert_location(fields)
    except ValidationFailure as e:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid location data", e)
    except LocshareError as e:
        logger.exception("Error saving location data")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error saving location data", e)

    return ApiResponse(
        success=True,
        message="Location data saved successfully",
        data=record.model_dump(mode="json"),
        collection=db.collection_name,
    )


@router.get("/locations", response_model=ApiResponse, response_model_exclude_none=True)
def list_locations(db: DatabaseService = Depends(get_database)):
    """All capture records, newest first"""
    try:
        records = db.list_locations()
    except LocshareError as e:
        logger.exception("Error fetching locations")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error fetching location data", e)

    return ApiResponse(
        success=True,
        count=len(records),
        data=[record.model_dump(mode="json") for record in records],
    )


@router.get("/location/{location_id}", response_model=ApiResponse, response_model_exclude_none=True)
def get_location(location_id: str, db: DatabaseService = Depends(get_database)):
    """One capture record by id"""
    try:
        record = db.get_location(location_id)
    except NotFound:
        return error_response(status.HTTP_404_NOT_FOUND, "Location not found")
    except (InvalidId, LocshareError) as e:
        logger.exception("Error fetching location %s", location_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error fetching location data", e)

    return ApiResponse(success=True, data=record.model_dump(mode="json"))


@router.get("/health", response_model=ApiResponse, response_model_exclude_none=True)
def health(db: DatabaseService = Depends(get_database)):
    """Connection state and collection names"""
    now = datetime.now(timezone.utc)
    try:
        info = db.health()
    except LocshareError as e:
        logger.exception("Health probe failed")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Database connection error",
            e,
            data={"state": db.connection.state},
            timestamp=now,
        )

    return ApiResponse(
        success=True,
        message="Server and database are running",
        data=info,
        timestamp=now,
    )


# The alternate deployment served the same handlers under /api
app.include_router(router)
app.include_router(router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
