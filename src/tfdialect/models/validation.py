"""スニペットバリデーション関連のデータモデル。"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, computed_field

Severity = Literal["info", "warn", "error"]

RuleId = Literal[
    "missing_tags_block",
    "required_tag_missing",
    "forbidden_pattern",
    "s3_security_default",
    "rds_security_default",
    "naming_convention",
]


class Violation(BaseModel):
    """スタイルポリシーからの逸脱1件。

    lineは位置を特定できない場合にNoneとなる（1行目と区別するため0は使わない）。
    """

    model_config = ConfigDict(frozen=True)

    rule_id: RuleId
    severity: Severity
    message: str
    line: int | None = None
    suggestion: str | None = None


class ValidationResult(BaseModel):
    """スニペット全体のバリデーション結果。"""

    violations: list[Violation]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return self.error_count == 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def error_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == "error")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def warning_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == "warn")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def info_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == "info")
