"""スタイルガイドの参照・検証・生成を行うサービス。"""

from typing import Any

import structlog

from tfdialect.models.errors import MissingParameterError
from tfdialect.models.generation import ExampleSnippet, GenerateRequest
from tfdialect.models.policy import PolicyDocument
from tfdialect.models.validation import ValidationResult
from tfdialect.services.examples import list_examples
from tfdialect.services.generator import ResourceGenerator, is_known_resource_type
from tfdialect.validators.snippet import SnippetValidator

logger = structlog.get_logger(__name__)


class StyleGuideService:
    """読み込み済みのスタイルポリシーに対するリクエストを処理する。

    ポリシーは起動時に一度だけ読み込まれたものを受け取り、変更しない。
    """

    def __init__(
        self,
        policy: PolicyDocument,
        validator: SnippetValidator | None = None,
        generator: ResourceGenerator | None = None,
    ) -> None:
        self._policy = policy
        self._validator = validator or SnippetValidator()
        self._generator = generator or ResourceGenerator()

    @property
    def policy(self) -> PolicyDocument:
        return self._policy

    async def get_style_guide(self) -> dict[str, Any]:
        """スタイルポリシー全体を返す。"""
        return self._policy.model_dump(mode="json", exclude_unset=True)

    async def list_examples(
        self,
        resource_type: str | None = None,
        search: str | None = None,
    ) -> list[ExampleSnippet]:
        """サンプルコードをリソース種別・検索語で絞り込んで返す。"""
        return list_examples(self._policy, resource_type, search)

    async def validate_snippet(self, code: str, file_path: str | None = None) -> ValidationResult:
        """Terraformスニペットをスタイルポリシーに基づいて検証する。

        Args:
            code: 検証対象のTerraformコード。
            file_path: 呼び出し元のファイルパス（ログ用。結果には影響しない）。

        Raises:
            MissingParameterError: codeが空の場合。
        """
        if not code:
            raise MissingParameterError("code")

        result = self._validator.validate(code, self._policy)
        logger.debug(
            "snippet_validated",
            file_path=file_path,
            valid=result.valid,
            errors=result.error_count,
            warnings=result.warning_count,
            infos=result.info_count,
        )
        return result

    async def generate_resource(
        self,
        resource_type: str,
        env: str,
        service: str,
        purpose: str | None = None,
        extra_tags: dict[str, str] | None = None,
    ) -> str:
        """スタイルポリシーに準拠したリソース定義を生成する。

        Raises:
            MissingParameterError: resource_type、env、serviceのいずれかが空の場合。
        """
        if not resource_type or not env or not service:
            raise MissingParameterError("resource_type", "env", "service")

        request = GenerateRequest(
            resource_type=resource_type,
            env=env,
            service=service,
            purpose=purpose or None,
            extra_tags=extra_tags or {},
        )
        code = self._generator.generate(request, self._policy)
        logger.debug(
            "resource_generated",
            resource_type=resource_type,
            known_type=is_known_resource_type(resource_type),
        )
        return code
