"""URLトークン認証ミドルウェア。"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """HTTPトランスポート利用時にクエリパラメータのtokenを検証する。

    TFDIALECT_URL_TOKEN が空の場合は検証しない。
    /health は検証をスキップする。
    """

    SKIP_PATHS = frozenset({"/health"})

    def __init__(self, app: ASGIApp, url_token: str = "") -> None:
        super().__init__(app)
        self.url_token = url_token

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.url_token or request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        if request.query_params.get("token", "") != self.url_token:
            return JSONResponse(
                {"error": "Unauthorized", "message": "Invalid or missing token"},
                status_code=401,
            )
        return await call_next(request)
