"""Request body size limit middleware.

Rejects requests whose body exceeds the configured maximum with 413.
Enforces the limit for both Content-Length and Transfer-Encoding: chunked.
A declared Content-Length is checked up front; the body stream is also
counted, so a client cannot under-declare its length.
"""

from typing import Callable

from starlette.exceptions import HTTPException

from dataroom.middleware._asgi import get_header, send_error


class _BodyTooLarge(HTTPException):
    """Raised from receive() once the streamed body passes the limit.

    An HTTPException so that routes parsing the body surface it as 413.
    """

    def __init__(self, received: int, max_bytes: int) -> None:
        super().__init__(413, f"Request body must be at most {max_bytes} bytes")
        self.received = received


async def _send_413(send: Callable, max_bytes: int, actual: int | None = None) -> None:
    details: dict[str, int] = {"max_bytes": max_bytes}
    if actual is not None:
        details["content_length"] = actual
    await send_error(
        send,
        413,
        "PAYLOAD_TOO_LARGE",
        f"Request body must be at most {max_bytes} bytes",
        details,
    )


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes (Content-Length or streamed). Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        content_length = get_header(scope, "content-length")
        if content_length:
            try:
                length = int(content_length)
            except ValueError:
                length = None
            if length is not None and length > max_bytes:
                await _send_413(send, max_bytes, length)
                return

        received = 0
        response_started = False

        async def counting_receive() -> dict:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_bytes:
                    raise _BodyTooLarge(received, max_bytes)
            return message

        async def tracking_send(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await app(scope, counting_receive, tracking_send)
        except _BodyTooLarge as e:
            if response_started:
                raise
            await _send_413(send, max_bytes, e.received)

    return asgi_app
