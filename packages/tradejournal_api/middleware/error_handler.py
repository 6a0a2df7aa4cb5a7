"""
Global Exception Handlers
"""
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from tradejournal_core.errors import ExternalServiceError, NotFoundError
from tradejournal_core.utils import get_logger
from tradejournal_api.config import settings
from tradejournal_api.schemas.base import ErrorResponse

logger = get_logger("api.errors")


def _error_body(error, code: str, detail=None) -> dict:
    return ErrorResponse(error=error, detail=detail, code=code).to_content()


def setup_exception_handlers(app: FastAPI):
    """Setup global exception handlers for the FastAPI app"""
    
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions"""
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail, f"HTTP_{exc.status_code}"),
            headers=exc.headers,
        )
    
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors"""
        errors = []
        for error in exc.errors():
            errors.append({
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            })
        
        return JSONResponse(
            status_code=422,
            content=_error_body("Validation Error", "VALIDATION_ERROR", errors),
        )
    
    @app.exception_handler(ValidationError)
    async def pydantic_validation_handler(request: Request, exc: ValidationError):
        """Handle Pydantic validation errors"""
        return JSONResponse(
            status_code=422,
            content=_error_body(
                "Data Validation Error",
                "PYDANTIC_VALIDATION_ERROR",
                exc.errors(include_url=False, include_context=False),
            ),
        )
    
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        """Handle missing accounts / trades"""
        return JSONResponse(
            status_code=404,
            content=_error_body("Not Found", "NOT_FOUND", str(exc)),
        )
    
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        """Handle value errors (including InvalidInputError)"""
        return JSONResponse(
            status_code=400,
            content=_error_body(str(exc), "VALUE_ERROR"),
        )
    
    @app.exception_handler(ExternalServiceError)
    async def external_service_handler(request: Request, exc: ExternalServiceError):
        """Handle LLM / news feed failures"""
        logger.warning(f"External service failure on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content=_error_body("Bad Gateway", "EXTERNAL_SERVICE_ERROR", str(exc)),
        )
    
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions"""
        logger.exception(f"Unhandled error on {request.url.path}")
        
        # Return generic error in production
        detail = str(exc) if settings.DEBUG else "An unexpected error occurred"
        
        return JSONResponse(
            status_code=500,
            content=_error_body("Internal Server Error", "INTERNAL_ERROR", detail),
        )
