"""ポリシーに定義されたサンプルコードの一覧取得。"""

from tfdialect.models.generation import ExampleSnippet
from tfdialect.models.policy import PolicyDocument


def list_examples(
    policy: PolicyDocument,
    resource_type: str | None = None,
    search: str | None = None,
) -> list[ExampleSnippet]:
    """サンプルコードを宣言順に返す。

    Args:
        policy: 読み込み済みのスタイルポリシー。
        resource_type: サンプル名に含まれるリソース種別（大文字小文字を区別しない）。
        search: サンプル名またはコードに含まれる検索語（大文字小文字を区別しない）。
    """
    results = [ExampleSnippet(name=name, code=code) for name, code in policy.examples.items()]

    if resource_type:
        resource_type_lower = resource_type.lower()
        results = [ex for ex in results if resource_type_lower in ex.name.lower()]

    if search:
        search_lower = search.lower()
        results = [ex for ex in results if search_lower in ex.name.lower() or search_lower in ex.code.lower()]

    return results
