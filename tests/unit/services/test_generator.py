"""ResourceGeneratorのユニットテスト。"""

from collections.abc import Callable

import pytest

from tfdialect.models.generation import GenerateRequest
from tfdialect.models.policy import PolicyDocument
from tfdialect.services.generator import (
    ResourceGenerator,
    build_resource_name,
    format_hcl_value,
    merge_tags,
    render_tags,
)
from tfdialect.validators.snippet import SnippetValidator

PolicyFactory = Callable[..., PolicyDocument]


def _request(resource_type: str = "aws_s3_bucket", **kwargs: object) -> GenerateRequest:
    params: dict[str, object] = {"resource_type": resource_type, "env": "prod", "service": "analytics"}
    params.update(kwargs)
    return GenerateRequest.model_validate(params)


class TestFormatHclValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(True, "true"), (False, "false"), (7, "7"), ("aws:kms", '"aws:kms"'), ('say "hi"', '"say \\"hi\\""')],
    )
    def test_format(self, value: object, expected: str) -> None:
        assert format_hcl_value(value) == expected

    @pytest.mark.parametrize("value", ["データ基盤", "café", "🚀"])
    def test_non_ascii_is_kept_verbatim(self, value: str) -> None:
        assert format_hcl_value(value) == f'"{value}"'


class TestBuildResourceName:
    _FORMAT = "<project>-<env>-<component>-<extra?>"

    def test_format_with_purpose(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(naming={"resource_format": self._FORMAT})
        assert build_resource_name(_request(purpose="logs"), policy) == "${local.project}-prod-analytics-logs"

    def test_format_without_purpose_has_no_trailing_hyphen(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(naming={"resource_format": self._FORMAT})
        assert build_resource_name(_request(), policy) == "${local.project}-prod-analytics"

    def test_empty_middle_segment_is_collapsed(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(naming={"resource_format": "<component>-<extra?>-<env>"})
        assert build_resource_name(_request(), policy) == "analytics-prod"

    def test_plain_extra_placeholder(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(naming={"resource_format": "<env>-<component>-<extra>"})
        assert build_resource_name(_request(purpose="logs"), policy) == "prod-analytics-logs"

    def test_fallback_without_format(self, make_policy: PolicyFactory) -> None:
        policy = make_policy()
        assert build_resource_name(_request(), policy) == "analytics-prod"
        assert build_resource_name(_request(purpose="logs"), policy) == "analytics-prod-logs"


class TestTags:
    def test_extra_tags_override_and_append(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(tagging={"defaults": {"Owner": "platform", "Environment": "dev"}})
        request = _request(extra_tags={"Team": "data", "Environment": "prod"})

        tags = merge_tags(request, policy)

        assert list(tags.items()) == [("Owner", "platform"), ("Environment", "prod"), ("Team", "data")]
        # ポリシー側のデフォルトタグは変更されない
        assert policy.default_tags == {"Owner": "platform", "Environment": "dev"}

    def test_render_inline_block(self) -> None:
        rendered = render_tags({"Owner": "platform", "kubernetes.io/role": "elb"})
        assert rendered == '  tags = {\n    Owner = "platform"\n    "kubernetes.io/role" = "elb"\n  }'

    def test_render_empty_uses_shared_reference(self) -> None:
        assert render_tags({}) == "  tags = local.default_tags"

    def test_render_non_ascii_key_and_value(self) -> None:
        rendered = render_tags({"Team": "データ基盤", "担当": "山田"})
        assert rendered == '  tags = {\n    Team = "データ基盤"\n    "担当" = "山田"\n  }'

    def test_numeric_default_is_rendered_as_string(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(tagging={"defaults": {"CostCenter": 1234}})
        code = ResourceGenerator().generate(_request(), policy)
        assert '    CostCenter = "1234"' in code


class TestS3Bucket:
    def test_without_security_defaults(self, make_policy: PolicyFactory) -> None:
        code = ResourceGenerator().generate(_request(), make_policy())
        assert code == (
            'resource "aws_s3_bucket" "this" {\n'
            '  bucket = "analytics-prod"\n'
            "\n"
            "  tags = local.default_tags\n"
            "}"
        )

    def test_all_security_resources(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(
            security_defaults={
                "s3_bucket": {"block_public_acls": True, "versioning": True, "encryption": "aws:kms"}
            }
        )

        code = ResourceGenerator().generate(_request(), policy)

        assert 'resource "aws_s3_bucket_versioning" "this"' in code
        assert 'status = "Enabled"' in code
        assert 'resource "aws_s3_bucket_public_access_block" "this"' in code
        assert "block_public_acls       = true" in code
        assert "block_public_policy     = false" in code
        assert "restrict_public_buckets = false" in code
        assert 'sse_algorithm = "aws:kms"' in code
        # 出力順: bucket → versioning → public access block → encryption
        assert (
            code.index('"aws_s3_bucket" "this"')
            < code.index("aws_s3_bucket_versioning")
            < code.index("aws_s3_bucket_public_access_block")
            < code.index("aws_s3_bucket_server_side_encryption_configuration")
        )

    def test_non_kms_encryption_uses_aes256(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(security_defaults={"s3_bucket": {"encryption": "AES256"}})
        code = ResourceGenerator().generate(_request(), policy)
        assert 'sse_algorithm = "AES256"' in code
        assert "aws_s3_bucket_versioning" not in code
        assert "aws_s3_bucket_public_access_block" not in code


class TestDbInstance:
    def test_uses_policy_defaults(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(security_defaults={"rds": {"storage_encrypted": True, "backup_retention_period": 14}})
        code = ResourceGenerator().generate(_request("aws_db_instance", purpose="orders"), policy)

        assert code.startswith('resource "aws_db_instance" "this" {\n  identifier = "analytics-prod-orders"\n')
        assert 'engine         = "postgres"' in code
        assert 'engine_version = "15.4"' in code
        assert 'instance_class = "db.t3.micro"' in code
        assert "allocated_storage = 20" in code
        assert "storage_encrypted = true" in code
        assert "backup_retention_period = 14" in code

    def test_fallback_defaults(self, make_policy: PolicyFactory) -> None:
        code = ResourceGenerator().generate(_request("aws_db_instance"), make_policy())
        assert "storage_encrypted = false" in code
        assert "backup_retention_period = 7" in code
        assert "# TODO: Configure username, password, vpc_security_group_ids, db_subnet_group_name" in code
        assert code.endswith("  tags = local.default_tags\n}")


class TestGenericResource:
    def test_unknown_type_produces_stub(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(tagging={"defaults": {"Owner": "platform"}})
        code = ResourceGenerator().generate(_request("aws_lambda_function", purpose="ingest"), policy)

        assert code == (
            "# Generated stub for aws_lambda_function\n"
            "# Please customize this resource according to your needs\n"
            "\n"
            'resource "aws_lambda_function" "this" {\n'
            '  name = "analytics-prod-ingest"\n'
            "\n"
            "  # TODO: Add required arguments for aws_lambda_function\n"
            "\n"
            "  tags = {\n"
            '    Owner = "platform"\n'
            "  }\n"
            "}"
        )


class TestDeterminism:
    @pytest.mark.parametrize("resource_type", ["aws_s3_bucket", "aws_db_instance", "google_storage_bucket"])
    def test_same_input_same_output(self, policy: PolicyDocument, resource_type: str) -> None:
        generator = ResourceGenerator()
        request = _request(resource_type, purpose="logs", extra_tags={"Team": "data"})
        assert generator.generate(request, policy) == generator.generate(request, policy)


class TestGeneratedCodeValidates:
    def test_s3_bucket_round_trip(self, make_policy: PolicyFactory) -> None:
        policy = make_policy(
            naming={"resource_format": "<project>-<env>-<component>-<extra?>"},
            tagging={
                "required_tags": ["Owner", "Environment"],
                "defaults": {"Owner": "platform", "Environment": "prod"},
            },
            security_defaults={
                "s3_bucket": {"block_public_acls": True, "versioning": True, "encryption": "aws:kms"}
            },
        )
        code = ResourceGenerator().generate(_request(purpose="logs"), policy)

        result = SnippetValidator().validate(code, policy)

        assert [v for v in result.violations if v.severity in ("error", "warn")] == []
        assert result.valid is True

    @pytest.mark.parametrize("resource_type", ["aws_s3_bucket", "aws_db_instance"])
    def test_bundled_policy_round_trip(self, policy: PolicyDocument, resource_type: str) -> None:
        code = ResourceGenerator().generate(_request(resource_type, purpose="logs"), policy)
        result = SnippetValidator().validate(code, policy)
        assert [v for v in result.violations if v.severity in ("error", "warn")] == []
