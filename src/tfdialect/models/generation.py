"""リソース生成・サンプル一覧関連のデータモデル。"""

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    """リソース生成リクエスト。

    resource_typeは未知の種別も受け付け、その場合は汎用スタブを生成する。
    """

    resource_type: str
    env: str
    service: str
    purpose: str | None = None
    extra_tags: dict[str, str] = Field(default_factory=dict)


class ExampleSnippet(BaseModel):
    """ポリシーに定義されたサンプルコード。"""

    name: str
    code: str
