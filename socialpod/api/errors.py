from fastapi import HTTPException, Request
from fastapi.responses import PlainTextResponse

from socialpod.i18n import locale_from_header, t


class EndpointError(HTTPException):
    """An API failure whose response body is a localized message."""

    def __init__(self, status_code: int, message_key: str):
        super().__init__(status_code=status_code, detail=message_key)
        self.message_key = message_key


async def endpoint_error_handler(request: Request, exc: EndpointError) -> PlainTextResponse:
    locale = locale_from_header(request.headers.get("accept-language"))
    return PlainTextResponse(t(exc.message_key, locale), status_code=exc.status_code)
