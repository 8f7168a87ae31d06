"""スタイルガイドのMCPリソース定義。"""

import yaml
from fastmcp import FastMCP

from tfdialect.services.style import StyleGuideService


def register_style_resources(mcp: FastMCP, style_service: StyleGuideService) -> None:
    """スタイルガイド関連のMCPリソースを登録する。"""

    @mcp.resource("tfdialect://style/guide")
    async def style_guide() -> str:
        """スタイルガイド全体をYAML形式で取得する。"""
        data = await style_service.get_style_guide()
        return yaml.dump(data, allow_unicode=True, default_flow_style=False, sort_keys=False)

    @mcp.resource("tfdialect://style/examples")
    async def example_names() -> str:
        """サンプルコード名の一覧を取得する。

        コード本体は list_examples ツールで取得します。
        """
        examples = await style_service.list_examples()
        return yaml.dump(
            {"examples": [ex.name for ex in examples]},
            allow_unicode=True,
            default_flow_style=False,
        )
