"""スタイルガイドのMCPプロンプト定義。"""

from fastmcp import FastMCP


def register_style_prompts(mcp: FastMCP) -> None:
    """スタイルガイド関連のMCPプロンプトを登録する。"""

    @mcp.prompt()
    async def terraform_style_review(code: str) -> str:
        """Terraformコードをスタイルガイドに沿って修正するためのプロンプト。

        validate_snippet による検証→修正→再検証のループをガイドします。

        Args:
            code: レビュー対象のTerraformコード。
        """
        return (
            "以下のTerraformコードを組織のスタイルガイドに沿ってレビューします。\n\n"
            f"```hcl\n{code}\n```\n\n"
            "## 手順\n\n"
            "1. `get_style_guide` ツールで命名規則・必須タグ・セキュリティデフォルトを確認してください。\n"
            "2. `validate_snippet` ツールでコードを検証してください。\n"
            "3. `severity` が `error` の違反はすべて修正してください。"
            "`suggestion` に修正方法が含まれています。\n"
            "4. `warn` の違反はセキュリティデフォルトからの逸脱です。"
            "意図的でない限り修正してください。\n"
            "5. 修正後、再度 `validate_snippet` を実行し、`valid` が true になるまで繰り返してください。\n\n"
            "## 注意事項\n\n"
            "- `info` の違反（命名規則）は参考情報です。既存リソース名の変更は利用者に確認してください。\n"
            "- 新しいリソースが必要な場合は `generate_resource` ツールで雛形を生成してください。\n"
            "- 似たリソースのサンプルは `list_examples` ツールで参照できます。\n"
        )
