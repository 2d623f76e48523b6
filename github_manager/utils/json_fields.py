from typing import Any, Dict, List, Optional


def get_string_field(obj: Any, name: str) -> str:
    """JSONオブジェクトから文字列フィールドを安全に取得

    フィールドが存在しない、またはnullの場合は空文字を返します。
    数値は文字列に変換されます。

    Args:
        obj: パース済みJSONオブジェクト
        name: フィールド名

    Returns:
        str: フィールド値（存在しない場合は空文字）
    """
    if not isinstance(obj, dict):
        return ""
    value = obj.get(name)
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def get_int_field(obj: Any, name: str) -> Optional[int]:
    """JSONオブジェクトから整数フィールドを安全に取得

    Args:
        obj: パース済みJSONオブジェクト
        name: フィールド名

    Returns:
        Optional[int]: フィールド値（存在しない場合はNone）
    """
    if not isinstance(obj, dict):
        return None
    value = obj.get(name)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def get_object_field(obj: Any, name: str) -> Dict[str, Any]:
    """ネストしたオブジェクトを取得（存在しない場合は空dict）"""
    if not isinstance(obj, dict):
        return {}
    value = obj.get(name)
    return value if isinstance(value, dict) else {}


def get_array_field(obj: Any, name: str) -> List[Any]:
    """配列フィールドを取得（存在しない場合は空リスト）"""
    if not isinstance(obj, dict):
        return []
    value = obj.get(name)
    return value if isinstance(value, list) else []


def has_field(obj: Any, name: str) -> bool:
    return isinstance(obj, dict) and obj.get(name) is not None
