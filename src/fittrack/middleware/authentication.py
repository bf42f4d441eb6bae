"""Authentication gate — establishes who is calling, never blocks.

Learn: Runs once per request before any handler:
1. No Authorization header, or not "Bearer ..." → pass through untouched
2. Otherwise decode the subject and validate the token against it
3. Valid → request.state.identity = AuthenticatedIdentity(subject)
4. Invalid/expired/mis-signed → log it, leave the request anonymous

Whatever happens, the request is forwarded. Register and login must
stay reachable without a token; rejecting anonymous callers is the
job of get_current_identity on protected routers.
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from fittrack.auth.dependencies import AuthenticatedIdentity
from fittrack.auth.errors import InvalidToken
from fittrack.auth.jwt import TokenCodec

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


class AuthenticationGateMiddleware(BaseHTTPMiddleware):
    """Populate request.state.identity from a bearer token, if any."""

    def __init__(self, app, codec: TokenCodec):
        super().__init__(app)
        self.codec = codec

    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.identity = getattr(request.state, "identity", None)
        self._authenticate(request)
        return await call_next(request)

    def _authenticate(self, request: Request) -> None:
        header = request.headers.get("Authorization")
        if header is None:
            return
        if not header.startswith(BEARER_PREFIX):
            logger.info(
                "auth.gate_unsupported_scheme",
                path=request.url.path,
            )
            return

        token = header[len(BEARER_PREFIX):]
        try:
            username = self.codec.extract_username(token)
            if request.state.identity is not None:
                return
            if self.codec.validate(token, username):
                request.state.identity = AuthenticatedIdentity(username)
                logger.debug("auth.gate_authenticated", username=username)
            else:
                logger.warning(
                    "auth.gate_rejected",
                    path=request.url.path,
                    reason="expired_or_subject_mismatch",
                )
        except InvalidToken as e:
            logger.warning(
                "auth.gate_rejected",
                path=request.url.path,
                reason=str(e),
            )
