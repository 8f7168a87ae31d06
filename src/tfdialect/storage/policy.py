"""ポリシーファイル（terraform-style.yaml）の探索と読み込み。"""

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from tfdialect.config import POLICY_FILENAMES, ServerConfig
from tfdialect.models.errors import InvalidPolicyError, PolicyNotFoundError
from tfdialect.models.policy import PolicyDocument

logger = structlog.get_logger(__name__)


def candidate_paths(config: ServerConfig) -> list[Path]:
    """ポリシーファイルの探索候補を優先順に返す。"""
    candidates: list[Path] = []
    if config.style_path is not None:
        candidates.append(config.style_path)
    candidates.extend((config.work_dir / name).resolve() for name in POLICY_FILENAMES)
    return candidates


def resolve_policy_path(config: ServerConfig) -> Path:
    """最初に存在する候補パスを返す。

    Raises:
        PolicyNotFoundError: どの候補も存在しない場合。
    """
    candidates = candidate_paths(config)
    for path in candidates:
        if path.is_file():
            return path
    raise PolicyNotFoundError(candidates)


def parse_policy(text: str, source: Path) -> PolicyDocument:
    """YAML文字列をPolicyDocumentに変換する。

    Raises:
        InvalidPolicyError: YAMLとして解釈できない、またはマッピングでない場合。
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InvalidPolicyError(source, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise InvalidPolicyError(source, "Invalid config format: top level must be a mapping")

    try:
        return PolicyDocument.model_validate(data)
    except ValidationError as e:
        raise InvalidPolicyError(source, str(e)) from e


def load_policy(config: ServerConfig) -> PolicyDocument:
    """設定に従ってポリシーファイルを探索・読み込みする。

    Raises:
        PolicyNotFoundError: ポリシーファイルが見つからない場合。
        InvalidPolicyError: ポリシーファイルが不正な場合。
    """
    path = resolve_policy_path(config)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidPolicyError(path, str(e)) from e

    policy = parse_policy(text, path)
    logger.info(
        "policy_loaded",
        path=str(path),
        required_tags=len(policy.required_tags),
        forbidden_patterns=len(policy.forbidden_patterns),
        examples=len(policy.examples),
    )
    return policy
