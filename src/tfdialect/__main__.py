"""tf-dialect MCPサーバーのコマンドラインエントリポイント。"""

import sys

import structlog

from tfdialect.config import ServerConfig
from tfdialect.log import configure_logging
from tfdialect.models.errors import TfDialectError
from tfdialect.server import create_server

logger = structlog.get_logger(__name__)


def main() -> None:
    config = ServerConfig()
    configure_logging(config.log_level, config.log_json)

    # ポリシーが読めない場合はサーバーを起動しない
    try:
        mcp = create_server(config)
    except TfDialectError as e:
        logger.error("policy_load_failed", error=str(e))
        sys.exit(1)

    if config.transport == "stdio":
        logger.info("server_starting", transport="stdio")
        mcp.run(transport="stdio")
        return

    import uvicorn
    from starlette.middleware import Middleware

    from tfdialect.middleware import TokenAuthMiddleware

    app = mcp.http_app(
        transport="streamable-http",
        middleware=[Middleware(TokenAuthMiddleware, url_token=config.url_token)],
    )
    logger.info("server_starting", transport="streamable-http", host=config.host, port=config.port)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
