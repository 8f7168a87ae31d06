"""スタイルガイドのMCPツール定義。"""

from typing import Any

from fastmcp import FastMCP

from tfdialect.models.errors import TfDialectError
from tfdialect.services.style import StyleGuideService


def register_style_tools(mcp: FastMCP, style_service: StyleGuideService) -> None:
    """スタイルガイド関連のMCPツールを登録する。"""

    @mcp.tool()
    async def get_style_guide() -> dict[str, Any]:
        """組織のTerraformスタイルガイド（ダイアレクト設定）全体を取得する。

        命名規則、必須タグ、デフォルトタグ、禁止パターン、
        リソース種別ごとのセキュリティデフォルト、サンプルコードが含まれます。
        """
        try:
            return await style_service.get_style_guide()
        except TfDialectError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def list_examples(
        resource_type: str | None = None,
        search: str | None = None,
    ) -> dict[str, Any]:
        """スタイルガイドのTerraformサンプルコードを一覧する。

        Args:
            resource_type: サンプル名で絞り込むリソース種別（例: "s3_bucket", "rds"）。
            search: サンプル名またはコードに対する検索語。
        """
        try:
            examples = await style_service.list_examples(resource_type, search)
            return {"examples": [ex.model_dump() for ex in examples]}
        except TfDialectError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def validate_snippet(code: str, file_path: str | None = None) -> dict[str, Any]:
        """Terraformスニペットを組織のスタイルガイドとセキュリティデフォルトで検証する。

        必須タグ、禁止パターン、セキュリティデフォルト、命名規則を検査し、
        違反（error / warn / info）のリストを返します。
        errorが1件もなければ valid は true になります。

        Args:
            code: 検証対象のTerraformコード。
            file_path: 呼び出し元のファイルパス（任意、コンテキスト用）。
        """
        try:
            result = await style_service.validate_snippet(code, file_path)
            return result.model_dump()
        except TfDialectError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def generate_resource(
        resource_type: str,
        env: str,
        service: str,
        purpose: str | None = None,
        extra_tags: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """組織の標準とセキュリティデフォルトに従ったTerraformリソースを生成する。

        aws_s3_bucket と aws_db_instance は専用テンプレートで生成し、
        それ以外のリソース種別は名前とタグのみを含むスタブを生成します。

        Args:
            resource_type: AWSリソース種別（例: "aws_s3_bucket", "aws_db_instance"）。
            env: 環境名（例: "prod", "dev", "staging"）。
            service: サービスまたはアプリケーション名。
            purpose: 用途・コンポーネント識別子（任意）。
            extra_tags: デフォルトタグに追加するタグ（任意）。
        """
        try:
            code = await style_service.generate_resource(resource_type, env, service, purpose, extra_tags)
            return {"code": code}
        except TfDialectError as e:
            return {"error": type(e).__name__, "message": str(e)}
