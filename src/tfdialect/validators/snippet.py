"""Terraformスニペットのスタイルポリシー検証ロジック。

HCLを構文解析せず、正規表現によるテキスト走査で検証する。
各チェックは「マッチャー（正規表現）」と「抽出関数」の組で構成し、
互いに独立してテストできるようにしている。
"""

import re
from typing import NamedTuple

import structlog

from tfdialect.models.policy import PolicyDocument, SettingValue
from tfdialect.models.validation import RuleId, ValidationResult, Violation

logger = structlog.get_logger(__name__)

# タグブロックの開始: tags = {
_TAGS_OPEN_RE = re.compile(r"tags\s*=\s*\{")

# 文字列テンプレート内の補間・ディレクティブの開始
_TEMPLATE_OPENERS: tuple[str, ...] = ("${", "%{")

# name = "<value>" 形式のリソース名代入
_NAME_ASSIGNMENT_RE = re.compile(r"\bname\s*=\s*[\"']([^\"']+)[\"']")

# リテラルではない（検証できない）名前の接頭辞
_NON_LITERAL_PREFIXES: tuple[str, ...] = ("${", "var.")

_FORBIDDEN_SUGGESTION = "Remove or replace this forbidden pattern"


class TagsBlock(NamedTuple):
    """タグブロックの開始オフセットと { } の内側の本文。"""

    start: int
    body: str


class SecurityCheck(NamedTuple):
    """セキュリティ設定1項目の存在チェック。

    suggestionの {value} はポリシーの設定値で置換される。
    """

    setting: str
    present: re.Pattern[str]
    message: str
    suggestion: str


class SecurityProfile(NamedTuple):
    """リソース種別ごとのセキュリティデフォルト検証定義。"""

    policy_key: str
    rule_id: RuleId
    marker: re.Pattern[str]
    checks: tuple[SecurityCheck, ...]


S3_BUCKET_PROFILE = SecurityProfile(
    policy_key="s3_bucket",
    rule_id="s3_security_default",
    marker=re.compile(r"resource\s+\"aws_s3_bucket\"", re.IGNORECASE),
    checks=(
        SecurityCheck(
            setting="block_public_acls",
            present=re.compile(r"block_public_acls\s*=\s*true", re.IGNORECASE),
            message="S3 bucket should have block_public_acls enabled",
            suggestion="Set block_public_acls = true",
        ),
        SecurityCheck(
            setting="block_public_policy",
            present=re.compile(r"block_public_policy\s*=\s*true", re.IGNORECASE),
            message="S3 bucket should have block_public_policy enabled",
            suggestion="Set block_public_policy = true",
        ),
        SecurityCheck(
            setting="versioning",
            present=re.compile(r"aws_s3_bucket_versioning|versioning(?:_configuration)?\s*[={]", re.IGNORECASE),
            message="S3 bucket should have versioning enabled",
            suggestion="Enable versioning",
        ),
        SecurityCheck(
            setting="encryption",
            present=re.compile(r"encryption", re.IGNORECASE),
            message="S3 bucket should have encryption enabled",
            suggestion='Enable encryption (e.g., encryption = "{value}")',
        ),
    ),
)

RDS_PROFILE = SecurityProfile(
    policy_key="rds",
    rule_id="rds_security_default",
    marker=re.compile(r"(resource\s+\"aws_db_instance\"|module\s+\".*rds)", re.IGNORECASE),
    checks=(
        SecurityCheck(
            setting="storage_encrypted",
            present=re.compile(r"storage_encrypted\s*=\s*true", re.IGNORECASE),
            message="RDS instance should have storage_encrypted = true",
            suggestion="Set storage_encrypted = true",
        ),
        SecurityCheck(
            setting="backup_retention_period",
            present=re.compile(r"backup_retention_period", re.IGNORECASE),
            message="RDS instance should specify backup_retention_period",
            suggestion="Set backup_retention_period = 7 (or higher)",
        ),
    ),
)

DEFAULT_SECURITY_PROFILES: tuple[SecurityProfile, ...] = (S3_BUCKET_PROFILE, RDS_PROFILE)


def line_number(code: str, index: int) -> int:
    """文字オフセットを1始まりの行番号に変換する。"""
    return code.count("\n", 0, index) + 1


def find_tags_block(code: str) -> TagsBlock | None:
    """閉じ括弧を持つ最初のタグブロックを検索する。"""
    for opener in _TAGS_OPEN_RE.finditer(code):
        end = closing_brace(code, opener.end())
        if end is not None:
            return TagsBlock(start=opener.start(), body=code[opener.end() : end])
    return None


def closing_brace(code: str, pos: int) -> int | None:
    """posの直前の { に対応する } のオフセットを返す。

    文字列リテラル内の括弧と ${...} / %{...} 内の括弧は数えない。
    対応する } がない場合はNone。
    """
    depth = 1
    in_string = False
    template_depth = 0
    i = pos
    while i < len(code):
        char = code[i]
        if template_depth:
            if char == "{":
                template_depth += 1
            elif char == "}":
                template_depth -= 1
        elif in_string:
            if char == "\\":
                i += 1
            elif char == '"':
                in_string = False
            elif code.startswith(_TEMPLATE_OPENERS, i):
                template_depth = 1
                i += 1
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def missing_tags(tags_body: str, required_tags: list[str]) -> list[str]:
    """タグブロック本文に含まれない必須タグを宣言順に返す。

    キーはクォート有無を問わず大文字小文字を区別しない。
    より長いキーの末尾に一致しただけの場合は含まれているとみなさない。
    """
    missing: list[str] = []
    for tag in required_tags:
        pattern = re.compile(rf"(?<![\w-])[\"']?{re.escape(tag)}[\"']?\s*=", re.IGNORECASE)
        if not pattern.search(tags_body):
            missing.append(tag)
    return missing


def literal_names(code: str) -> list[tuple[str, int]]:
    """リテラルな name = "..." の値と出現オフセットを返す。"""
    names: list[tuple[str, int]] = []
    for match in _NAME_ASSIGNMENT_RE.finditer(code):
        value = match.group(1)
        if value.startswith(_NON_LITERAL_PREFIXES):
            continue
        names.append((value, match.start()))
    return names


class SnippetValidator:
    """スタイルポリシーに基づくTerraformスニペットの検証を行う。

    状態を持たず、ポリシーは呼び出しごとに受け取る。
    セキュリティデフォルトの対象リソース種別はprofilesで拡張できる。
    """

    def __init__(self, profiles: tuple[SecurityProfile, ...] = DEFAULT_SECURITY_PROFILES) -> None:
        self._profiles = profiles

    def validate(self, code: str, policy: PolicyDocument) -> ValidationResult:
        """スニペットをスタイルポリシーに基づいて検証する。

        チェックは必須タグ→禁止パターン→セキュリティデフォルト→命名規則の
        固定順で実行され、違反はその順に並ぶ。

        Args:
            code: 検証対象のTerraformコード。
            policy: 読み込み済みのスタイルポリシー。

        Returns:
            違反リストとerror有無を含むバリデーション結果。
        """
        violations: list[Violation] = []
        violations.extend(self.check_required_tags(code, policy))
        violations.extend(self.check_forbidden_patterns(code, policy))
        violations.extend(self.check_security_defaults(code, policy, self._profiles))
        violations.extend(self.check_naming_convention(code, policy))
        return ValidationResult(violations=violations)

    @staticmethod
    def check_required_tags(code: str, policy: PolicyDocument) -> list[Violation]:
        """必須タグの有無チェック。"""
        required_tags = policy.required_tags
        if not required_tags:
            return []

        block = find_tags_block(code)
        if block is None:
            return [
                Violation(
                    rule_id="missing_tags_block",
                    severity="error",
                    message="No tags block found",
                    suggestion=f"Add a tags block with required tags: {', '.join(required_tags)}",
                )
            ]

        missing = missing_tags(block.body, required_tags)
        if not missing:
            return []

        return [
            Violation(
                rule_id="required_tag_missing",
                severity="error",
                message=f"Missing required tags: {', '.join(missing)}",
                line=line_number(code, block.start),
                suggestion="Add the following tags: " + ", ".join(f'{tag} = "..."' for tag in missing),
            )
        ]

    @staticmethod
    def check_forbidden_patterns(code: str, policy: PolicyDocument) -> list[Violation]:
        """禁止パターンの出現チェック。

        コンパイルできないパターンは警告ログを出してスキップする。
        """
        violations: list[Violation] = []
        for forbidden in policy.forbidden_patterns:
            try:
                regex = re.compile(forbidden.match)
            except re.error as e:
                logger.warning(
                    "invalid_forbidden_pattern",
                    pattern=forbidden.match,
                    description=forbidden.description,
                    error=str(e),
                )
                continue

            for match in regex.finditer(code):
                violations.append(
                    Violation(
                        rule_id="forbidden_pattern",
                        severity="error",
                        message=forbidden.description,
                        line=line_number(code, match.start()),
                        suggestion=_FORBIDDEN_SUGGESTION,
                    )
                )
        return violations

    @staticmethod
    def check_security_defaults(
        code: str,
        policy: PolicyDocument,
        profiles: tuple[SecurityProfile, ...] = DEFAULT_SECURITY_PROFILES,
    ) -> list[Violation]:
        """リソース種別ごとのセキュリティデフォルトチェック。

        ポリシーに該当種別の定義があり、かつコード中にその種別の
        リソース宣言がある場合のみ検証する。
        """
        violations: list[Violation] = []
        for profile in profiles:
            defaults = policy.security_defaults_for(profile.policy_key)
            if not defaults or not profile.marker.search(code):
                continue
            violations.extend(_check_profile(code, profile, defaults))
        return violations

    @staticmethod
    def check_naming_convention(code: str, policy: PolicyDocument) -> list[Violation]:
        """リソース名の命名規則チェック。

        ハイフン区切りの要素数が命名フォーマットのプレースホルダー数に
        満たない名前を検出する。
        """
        naming_format = policy.naming_format
        component_count = policy.naming_placeholder_count
        if not naming_format or component_count < 2:
            return []

        violations: list[Violation] = []
        for name, offset in literal_names(code):
            parts = name.split("-")
            if len(parts) >= component_count:
                continue
            violations.append(
                Violation(
                    rule_id="naming_convention",
                    severity="info",
                    message=f'Resource name "{name}" doesn\'t follow format: {naming_format}',
                    line=line_number(code, offset),
                    suggestion=(
                        f"Use format: {naming_format} "
                        f"(expected {component_count}+ parts, got {len(parts)})"
                    ),
                )
            )
        return violations


def _check_profile(
    code: str,
    profile: SecurityProfile,
    defaults: dict[str, SettingValue],
) -> list[Violation]:
    violations: list[Violation] = []
    for check in profile.checks:
        value = defaults.get(check.setting)
        if not value or check.present.search(code):
            continue
        violations.append(
            Violation(
                rule_id=profile.rule_id,
                severity="warn",
                message=check.message,
                suggestion=check.suggestion.format(value=value),
            )
        )
    return violations
