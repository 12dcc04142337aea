import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_413_CONTENT_TOO_LARGE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

logger = logging.getLogger(__name__)


class CardError(Exception):
    """
    Erreur métier rendue au client sous la forme {"error": message}.
    """

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Errore interno"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CardError):
    status_code = HTTP_400_BAD_REQUEST
    default_message = "Richiesta non valida"


class NotFound(CardError):
    status_code = HTTP_404_NOT_FOUND
    default_message = "Scheda non trovata"


class PayloadTooLarge(CardError):
    status_code = HTTP_413_CONTENT_TOO_LARGE
    default_message = "File troppo grande"


class InternalError(CardError):
    status_code = HTTP_500_INTERNAL_SERVER_ERROR


async def card_error_handler(request: Request, exc: CardError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"error": ValidationError.default_message},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # 404/405 du routeur et de StaticFiles : même forme {"error": ...}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CardError, card_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
