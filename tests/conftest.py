"""テスト共通フィクスチャ。"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tfdialect.config import ServerConfig
from tfdialect.models.policy import PolicyDocument
from tfdialect.services.style import StyleGuideService
from tfdialect.storage.policy import load_policy


@pytest.fixture
def config_dir() -> Path:
    """設定ファイルディレクトリ。"""
    return Path(__file__).parent.parent / "config"


@pytest.fixture
def server_config(config_dir: Path, tmp_path: Path) -> ServerConfig:
    """同梱のterraform-style.yamlを指すServerConfig。"""
    return ServerConfig(style_path=config_dir / "terraform-style.yaml", work_dir=tmp_path)


@pytest.fixture
def policy(server_config: ServerConfig) -> PolicyDocument:
    """同梱のスタイルポリシー。"""
    return load_policy(server_config)


@pytest.fixture
def make_policy() -> Callable[..., PolicyDocument]:
    """セクションを指定して最小構成のPolicyDocumentを作るファクトリ。"""

    def _make(**sections: Any) -> PolicyDocument:
        return PolicyDocument.model_validate(sections)

    return _make


@pytest.fixture
def style_service(policy: PolicyDocument) -> StyleGuideService:
    """テスト用StyleGuideService。"""
    return StyleGuideService(policy=policy)
