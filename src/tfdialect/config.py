"""tf-dialectサーバーの設定管理。"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ポリシーファイルの既定ファイル名（カレントディレクトリから探索する順）
POLICY_FILENAMES: tuple[str, ...] = ("terraform-style.yaml", "terraform-style.yml")


class ServerConfig(BaseSettings):
    """サーバー設定。環境変数から読み込み可能。"""

    model_config = SettingsConfigDict(env_prefix="TFDIALECT_", populate_by_name=True)

    # ポリシーファイルの明示パス。未指定時はwork_dirからPOLICY_FILENAMESを探索する
    style_path: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("TERRAFORM_STYLE_PATH", "TFDIALECT_STYLE_PATH"),
    )
    work_dir: Path = Field(default_factory=Path.cwd)

    transport: Literal["stdio", "streamable-http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
    url_token: str = ""

    log_level: str = "INFO"
    log_json: bool = False
