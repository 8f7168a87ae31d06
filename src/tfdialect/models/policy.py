"""スタイルポリシー（terraform-style.yaml）のデータモデル。"""

import re
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

SettingValue = bool | int | float | str

# 命名フォーマット中のプレースホルダー（<project>, <env>, <component>, <extra?> など）
PLACEHOLDER_RE = re.compile(r"<[^>]+>")


def _scalar_to_str(value: Any) -> Any:
    """YAMLで数値・真偽値として読まれたスカラーを文字列にそろえる。"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


# タグ名・タグ値（CostCenter: 1234 のような数値も文字列として扱う）
TagText = Annotated[str, BeforeValidator(_scalar_to_str)]


class _PolicyModel(BaseModel):
    """ポリシー構成要素の共通設定。読み込み後は変更しない。"""

    model_config = ConfigDict(frozen=True, extra="allow")


class ModulesConfig(_PolicyModel):
    """モジュール利用方針。"""

    pattern: str | None = None
    shared_module_path: str | None = None
    prefer_shared_modules: bool | None = None


class NamingConfig(_PolicyModel):
    """命名規則。"""

    resource_format: str | None = None
    variable_case: str | None = None
    output_case: str | None = None


class TaggingConfig(_PolicyModel):
    """タグ付け規則。"""

    required_tags: list[TagText] = Field(default_factory=list)
    defaults: dict[TagText, TagText] = Field(default_factory=dict)


class ProviderConfig(_PolicyModel):
    """利用を許可するプロバイダー。"""

    name: str
    version_constraint: str | None = None


class ForbiddenPattern(_PolicyModel):
    """コード中に出現してはならないパターン。"""

    description: str
    match: str


class ProvidersConfig(_PolicyModel):
    """プロバイダー関連の規則。"""

    allowed: list[ProviderConfig] = Field(default_factory=list)
    forbidden_patterns: list[ForbiddenPattern] = Field(default_factory=list)


class PolicyDocument(_PolicyModel):
    """組織のTerraformスタイルポリシー。

    プロセス起動時に一度だけ読み込まれ、以降は読み取り専用として
    バリデータ・ジェネレータに明示的に渡される。
    """

    modules: ModulesConfig | None = None
    naming: NamingConfig | None = None
    tagging: TaggingConfig | None = None
    providers: ProvidersConfig | None = None
    security_defaults: dict[str, dict[str, SettingValue]] = Field(default_factory=dict)
    examples: dict[str, str] = Field(default_factory=dict)

    @property
    def naming_format(self) -> str | None:
        return self.naming.resource_format if self.naming else None

    @property
    def naming_placeholder_count(self) -> int:
        """命名フォーマットに含まれるプレースホルダー数。"""
        if not self.naming_format:
            return 0
        return len(PLACEHOLDER_RE.findall(self.naming_format))

    @property
    def required_tags(self) -> list[str]:
        return list(self.tagging.required_tags) if self.tagging else []

    @property
    def default_tags(self) -> dict[str, str]:
        return dict(self.tagging.defaults) if self.tagging else {}

    @property
    def forbidden_patterns(self) -> list[ForbiddenPattern]:
        return list(self.providers.forbidden_patterns) if self.providers else []

    def security_defaults_for(self, kind: str) -> dict[str, SettingValue] | None:
        """リソース種別のセキュリティデフォルトを返す。未定義の場合はNone。"""
        defaults = self.security_defaults.get(kind)
        return dict(defaults) if defaults is not None else None
