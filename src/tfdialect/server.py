"""FastMCPベースのMCPサーバーエントリポイント。"""

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from tfdialect.config import ServerConfig
from tfdialect.models.policy import PolicyDocument
from tfdialect.prompts.style import register_style_prompts
from tfdialect.resources.style import register_style_resources
from tfdialect.services.style import StyleGuideService
from tfdialect.storage.policy import load_policy
from tfdialect.tools.style import register_style_tools


def create_server(config: ServerConfig | None = None, policy: PolicyDocument | None = None) -> FastMCP:
    """tf-dialect MCPサーバーを作成し、ツール・リソース・プロンプトを登録する。

    Args:
        config: サーバー設定。Noneの場合はデフォルト設定を使用。
        policy: 読み込み済みのスタイルポリシー。Noneの場合は設定に従って読み込む。

    Returns:
        設定済みのFastMCPインスタンス。

    Raises:
        PolicyNotFoundError: ポリシーファイルが見つからない場合。
        InvalidPolicyError: ポリシーファイルが不正な場合。
    """
    if config is None:
        config = ServerConfig()
    if policy is None:
        policy = load_policy(config)

    mcp = FastMCP("tf-dialect")

    style_service = StyleGuideService(policy=policy)

    register_style_tools(mcp, style_service)
    register_style_resources(mcp, style_service)
    register_style_prompts(mcp)

    # ヘルスチェックエンドポイント（HTTPトランスポート用）
    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return mcp
