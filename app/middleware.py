# =============================================================================
# app/middleware.py - Request Pipeline
# =============================================================================
# Middleware stages applied to every HTTP request before it reaches a router.
#
# The order is declared once, in build_pipeline(), as a list of named stages.
# The first stage is the outermost: it sees the request first and the
# response last.
#
#   Request -> [cors] -> [json_body] -> [cookies] -> Router
#
# - cors: rejects preflights from origins outside the allow-list and only
#   echoes allowed origins back, so every route gets the same policy
# - json_body: parses application/json bodies into request.state.json
# - cookies: parses the Cookie header into request.state.cookies
# =============================================================================

import json
import logging
from dataclasses import dataclass

from starlette.datastructures import Headers
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import cookie_parser
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.config import Settings
from app.exceptions import MalformedJSONError, PayloadTooLargeError, error_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stage:
    """One named entry in the request pipeline."""
    name: str
    middleware: Middleware


def build_pipeline(settings: Settings) -> list[Stage]:
    """
    Declare the request pipeline, outermost stage first.

    Args:
        settings: Application settings (CORS allow-list, body limit)

    Returns:
        Ordered list of stages, ready for FastAPI(middleware=...)
    """
    return [
        Stage(
            "cors",
            Middleware(
                CORSMiddleware,
                allow_origins=settings.cors_origins_list,
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        ),
        Stage(
            "json_body",
            Middleware(JSONBodyMiddleware, limit_bytes=settings.JSON_BODY_LIMIT_BYTES),
        ),
        Stage("cookies", Middleware(CookieMiddleware)),
    ]


def _is_json(content_type: str | None) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json"


class JSONBodyMiddleware:
    """
    Parse JSON request bodies into request.state.json.

    The raw body is buffered, parsed, and replayed so route handlers can
    still read it. Requests without a JSON content type get
    request.state.json = None. An empty JSON body parses to {}; any other
    top-level value must be an object or array.
    """

    def __init__(self, app: ASGIApp, limit_bytes: int = 100 * 1024):
        self.app = app
        self.limit_bytes = limit_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        headers = Headers(scope=scope)

        if not _is_json(headers.get("content-type")):
            state["json"] = None
            await self.app(scope, receive, send)
            return

        declared = headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.limit_bytes:
            await error_response(PayloadTooLargeError(self.limit_bytes))(scope, receive, send)
            return

        chunks = []
        size = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            chunk = message.get("body", b"")
            size += len(chunk)
            if size > self.limit_bytes:
                await error_response(PayloadTooLargeError(self.limit_bytes))(scope, receive, send)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)
        body = b"".join(chunks)

        try:
            parsed = json.loads(body) if body.strip() else {}
        except (ValueError, RecursionError) as e:
            # RecursionError: nesting deeper than the decoder can follow
            logger.debug(f"Rejected malformed JSON body on {scope.get('path')}: {e}")
            await error_response(MalformedJSONError(str(e)))(scope, receive, send)
            return

        if not isinstance(parsed, (dict, list)):
            error = MalformedJSONError("top-level value must be an object or array")
            await error_response(error)(scope, receive, send)
            return
        state["json"] = parsed

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)


class CookieMiddleware:
    """Parse the Cookie header into request.state.cookies ({} when absent)."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            state = scope.setdefault("state", {})
            state["cookies"] = cookie_parser(Headers(scope=scope).get("cookie", ""))
        await self.app(scope, receive, send)
