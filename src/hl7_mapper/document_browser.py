"""Key listings used when picking source paths out of a document"""

from typing import Any, List, Optional

from hl7_mapper.constants import OBJECT_KEYS_LIMIT, ROOT_PATH


def top_level_keys(document: Any) -> List[str]:
    return list(document.keys()) if isinstance(document, dict) else []


def object_base_path(document: Any, name: Optional[str]) -> str:
    """Path of the named top level object; for a list, the path of its first element"""
    if not name:
        return ""
    value = document.get(name) if isinstance(document, dict) else None
    if isinstance(value, list):
        return f"{ROOT_PATH}.{name}[0]"
    return f"{ROOT_PATH}.{name}"


def object_keys(document: Any, name: Optional[str], search: str = "", limit: int = OBJECT_KEYS_LIMIT) -> List[str]:
    """
    Keys of the named top level object, or of the first element of a named list,
    filtered by a case-insensitive substring and truncated to limit.
    """
    if not name or not isinstance(document, dict):
        return []

    value = document.get(name)
    if isinstance(value, list):
        value = value[0] if value else None
    if not isinstance(value, dict):
        return []

    term = search.strip().lower()
    keys = [key for key in value if not term or term in str(key).lower()]
    return keys[:limit]
