"""tf-dialectのカスタム例外クラス。"""

from pathlib import Path


class TfDialectError(Exception):
    """tf-dialectの基底例外クラス。"""


class PolicyNotFoundError(TfDialectError):
    """ポリシーファイルが見つからない場合の例外。"""

    def __init__(self, searched: list[Path]) -> None:
        locations = ", ".join(str(p) for p in searched) or "(none)"
        super().__init__(
            f"No terraform-style.yaml found (searched: {locations}). "
            "Please create one in your project root or set TERRAFORM_STYLE_PATH."
        )
        self.searched = searched


class InvalidPolicyError(TfDialectError):
    """ポリシーファイルの形式が不正な場合の例外。"""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to load config from {path}: {reason}")
        self.path = path
        self.reason = reason


class MissingParameterError(TfDialectError):
    """リクエストに必須パラメータが含まれていない場合の例外。"""

    def __init__(self, *parameters: str) -> None:
        if len(parameters) == 1:
            message = f"{parameters[0]} parameter is required"
        else:
            message = f"{', '.join(parameters[:-1])}, and {parameters[-1]} are required"
        super().__init__(message)
        self.parameters = list(parameters)
