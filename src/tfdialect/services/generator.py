"""スタイルポリシーに準拠したTerraformリソース定義の生成ロジック。"""

import json
import re
from collections.abc import Callable
from typing import Any

from tfdialect.models.generation import GenerateRequest
from tfdialect.models.policy import PolicyDocument, SettingValue

# <project> の置換先（利用側のlocalsで定義されるプロジェクト名）
PROJECT_REFERENCE = "${local.project}"

# タグが空の場合に参照する共通タグ
DEFAULT_TAGS_REFERENCE = "local.default_tags"

_EXTRA_PLACEHOLDER_RE = re.compile(r"<extra\??>")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")
_BARE_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")

_S3_BUCKET_TEMPLATE = """resource "aws_s3_bucket" "this" {{
  bucket = {name}

{tags}
}}"""

_S3_VERSIONING_TEMPLATE = """resource "aws_s3_bucket_versioning" "this" {
  bucket = aws_s3_bucket.this.id

  versioning_configuration {
    status = "Enabled"
  }
}"""

_S3_PUBLIC_ACCESS_BLOCK_TEMPLATE = """resource "aws_s3_bucket_public_access_block" "this" {{
  bucket = aws_s3_bucket.this.id

  block_public_acls       = {block_public_acls}
  block_public_policy     = {block_public_policy}
  ignore_public_acls      = {block_public_acls}
  restrict_public_buckets = {block_public_policy}
}}"""

_S3_ENCRYPTION_TEMPLATE = """resource "aws_s3_bucket_server_side_encryption_configuration" "this" {{
  bucket = aws_s3_bucket.this.id

  rule {{
    apply_server_side_encryption_by_default {{
      sse_algorithm = "{sse_algorithm}"
    }}
  }}
}}"""

_DB_INSTANCE_TEMPLATE = """resource "aws_db_instance" "this" {{
  identifier = {name}

  engine         = "postgres"
  engine_version = "15.4"
  instance_class = "db.t3.micro"

  allocated_storage = 20
  storage_encrypted = {storage_encrypted}

  backup_retention_period = {backup_retention_period}

  # TODO: Configure username, password, vpc_security_group_ids, db_subnet_group_name

{tags}
}}"""

_GENERIC_TEMPLATE = """# Generated stub for {resource_type}
# Please customize this resource according to your needs

resource "{resource_type}" "this" {{
  name = {name}

  # TODO: Add required arguments for {resource_type}

{tags}
}}"""


def format_hcl_value(value: Any) -> str:
    """Python値をHCL形式の文字列に変換する。"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(str(value), ensure_ascii=False)


def build_resource_name(request: GenerateRequest, policy: PolicyDocument) -> str:
    """命名フォーマットに従ってリソース名を組み立てる。

    オプション要素（<extra?>）が空の場合に生じる連続ハイフンは1つにまとめ、
    先頭・末尾のハイフンは取り除く。
    """
    naming_format = policy.naming_format
    if not naming_format:
        parts = [request.service, request.env]
        if request.purpose:
            parts.append(request.purpose)
        return "-".join(parts)

    name = (
        naming_format.replace("<project>", PROJECT_REFERENCE)
        .replace("<env>", request.env)
        .replace("<component>", request.service)
    )
    name = _EXTRA_PLACEHOLDER_RE.sub(request.purpose or "", name)
    return _HYPHEN_RUN_RE.sub("-", name).strip("-")


def merge_tags(request: GenerateRequest, policy: PolicyDocument) -> dict[str, str]:
    """デフォルトタグとリクエストの追加タグをマージする。

    キーが衝突した場合は追加タグを優先し、順序はデフォルトタグの宣言順、
    続いて新規キーのリクエスト順とする。
    """
    tags = policy.default_tags
    tags.update(request.extra_tags)
    return tags


def render_tags(tags: dict[str, str]) -> str:
    """タグブロックを描画する。空の場合は共通タグへの参照を返す。"""
    if not tags:
        return f"  tags = {DEFAULT_TAGS_REFERENCE}"

    lines = [f"    {_format_tag_key(key)} = {format_hcl_value(value)}" for key, value in tags.items()]
    return "  tags = {\n" + "\n".join(lines) + "\n  }"


def _format_tag_key(key: str) -> str:
    return key if _BARE_KEY_RE.match(key) else json.dumps(key, ensure_ascii=False)


def _sse_algorithm(encryption: SettingValue) -> str:
    """暗号化設定値からSSEアルゴリズムを決定する。KMS指定以外はAES256。"""
    return "aws:kms" if "kms" in str(encryption).lower() else "AES256"


def _render_s3_bucket(name: str, tags: str, policy: PolicyDocument) -> str:
    defaults = policy.security_defaults_for("s3_bucket") or {}

    blocks = [_S3_BUCKET_TEMPLATE.format(name=format_hcl_value(name), tags=tags)]

    if defaults.get("versioning"):
        blocks.append(_S3_VERSIONING_TEMPLATE)

    block_public_acls = bool(defaults.get("block_public_acls", False))
    block_public_policy = bool(defaults.get("block_public_policy", False))
    if block_public_acls or block_public_policy:
        blocks.append(
            _S3_PUBLIC_ACCESS_BLOCK_TEMPLATE.format(
                block_public_acls=format_hcl_value(block_public_acls),
                block_public_policy=format_hcl_value(block_public_policy),
            )
        )

    encryption = defaults.get("encryption")
    if encryption:
        blocks.append(_S3_ENCRYPTION_TEMPLATE.format(sse_algorithm=_sse_algorithm(encryption)))

    return "\n\n".join(blocks)


def _render_db_instance(name: str, tags: str, policy: PolicyDocument) -> str:
    defaults = policy.security_defaults_for("rds") or {}
    return _DB_INSTANCE_TEMPLATE.format(
        name=format_hcl_value(name),
        storage_encrypted=format_hcl_value(defaults.get("storage_encrypted") or False),
        backup_retention_period=format_hcl_value(defaults.get("backup_retention_period") or 7),
        tags=tags,
    )


def _render_generic(resource_type: str, name: str, tags: str) -> str:
    return _GENERIC_TEMPLATE.format(resource_type=resource_type, name=format_hcl_value(name), tags=tags)


# 個別テンプレートを持つリソース種別。ここにないものは汎用スタブになる
KNOWN_RESOURCE_RENDERERS: dict[str, Callable[[str, str, PolicyDocument], str]] = {
    "aws_s3_bucket": _render_s3_bucket,
    "aws_db_instance": _render_db_instance,
}


def is_known_resource_type(resource_type: str) -> bool:
    return resource_type in KNOWN_RESOURCE_RENDERERS


class ResourceGenerator:
    """スタイルポリシーに準拠したTerraformリソース定義を生成する。"""

    def generate(self, request: GenerateRequest, policy: PolicyDocument) -> str:
        """リソース定義を生成する。

        同一のリクエストとポリシーからは常に同一の文字列を生成する。

        Args:
            request: 生成リクエスト。
            policy: 読み込み済みのスタイルポリシー。

        Returns:
            Terraformコード。
        """
        name = build_resource_name(request, policy)
        tags = render_tags(merge_tags(request, policy))

        renderer = KNOWN_RESOURCE_RENDERERS.get(request.resource_type)
        if renderer is None:
            return _render_generic(request.resource_type, name, tags)
        return renderer(name, tags, policy)
