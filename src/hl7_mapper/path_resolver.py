"""
Path expressions over JSON documents.
A path is written `$` for the root, `.key` for a key step and `[n]` for an index step, e.g. `$.patient.name[0]`.
Resolution is permissive: a location that does not exist is not an error, the caller's default is returned instead.
"""

import decimal
import re
from typing import Any, List, Optional, Union

import simplejson as json
from simplejson import JSONDecodeError

from hl7_mapper.constants import DEFAULT_MAX_MATCHES, ROOT_PATH
from hl7_mapper.models.errors import AmbiguousPathError, DocumentParseError

PathStep = Union[str, int]

QUOTE_CHARACTERS = "'\"`"
BARE_KEY_PATTERN = re.compile(r"^(?:\$\.)?\.?([A-Za-z0-9_]+)$")

# Bracket contents that are neither digits nor a quoted key; never within bounds of a list
UNRESOLVABLE_INDEX = -1
_MISSING = object()


def parse_document(data: Any) -> Any:
    """
    Returns the document held in data. JSON text is decoded, with non-integer numbers kept as Decimal so that they
    are emitted exactly as received. Any other value is assumed to be an already decoded document.
    Raises DocumentParseError if the text is not valid JSON or nests deeper than the decoder can follow.
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    if not isinstance(data, str):
        return data
    try:
        return json.loads(data, parse_float=decimal.Decimal)
    except (JSONDecodeError, RecursionError) as error:
        raise DocumentParseError(str(error)) from error


def _strip_quotes(text: str) -> str:
    if text[:1] and text[0] in QUOTE_CHARACTERS:
        text = text[1:]
    if text[-1:] and text[-1] in QUOTE_CHARACTERS:
        text = text[:-1]
    return text


def normalize_path(text: Optional[str]) -> str:
    """
    Returns the canonical form of a user supplied path: `$` prefixed, without surrounding whitespace or quotes.
    An empty string means "no path". Normalizing a canonical path returns it unchanged.
    """
    if not text:
        return ""
    unquoted = _strip_quotes(str(text).strip()).strip()
    if not unquoted:
        return ""

    if unquoted.startswith(ROOT_PATH):
        return unquoted
    if unquoted.startswith("."):
        return f"{ROOT_PATH}{unquoted}"
    return f"{ROOT_PATH}.{unquoted}"


def _bracket_step(contents: str) -> PathStep:
    if contents.isascii() and contents.isdigit():
        return int(contents)
    if len(contents) >= 2 and contents[0] == contents[-1] and contents[0] in QUOTE_CHARACTERS:
        return contents[1:-1]
    return UNRESOLVABLE_INDEX


def tokenize_path(text: Optional[str]) -> List[PathStep]:
    """
    Splits a path into key steps (str) and index steps (int).
    An unterminated bracket ends tokenization at that point rather than failing.
    """
    if not text or text == ROOT_PATH:
        return []

    remainder = text[1:] if text.startswith(ROOT_PATH) else text
    steps = []
    current = ""
    position = 0

    while position < len(remainder):
        character = remainder[position]

        if character == ".":
            if current:
                steps.append(current)
            current = ""

        elif character == "[":
            if current:
                steps.append(current)
            current = ""
            closing = remainder.find("]", position)
            if closing == -1:
                return steps
            steps.append(_bracket_step(remainder[position + 1 : closing]))
            position = closing

        else:
            current += character

        position += 1

    if current:
        steps.append(current)
    return steps


def _lookup_key(mapping: dict, key: str, default: Any) -> Any:
    if key in mapping:
        return mapping[key]

    # Documents do not always agree on key casing; the first key in iteration order wins
    lowered = key.lower()
    matching_key = next((k for k in mapping if isinstance(k, str) and k.lower() == lowered), None)
    return default if matching_key is None else mapping[matching_key]


def resolve(document: Any, steps: List[PathStep], default: Any = None) -> Any:
    """Walks the document one step at a time, returning default as soon as a step cannot be followed"""
    current = document

    for step in steps:
        if current is None:
            return default

        if isinstance(step, str):
            if not isinstance(current, dict):
                return default
            current = _lookup_key(current, step, _MISSING)
            if current is _MISSING:
                return default

        elif isinstance(current, list) and 0 <= step < len(current):
            current = current[step]

        else:
            return default

    return current


def resolve_path(document: Any, path_text: Optional[str], default: Any = None) -> Any:
    """Returns the value at path_text, or default if the path is empty or does not resolve"""
    canonical_path = normalize_path(path_text)
    if not canonical_path:
        return default
    return resolve(document, tokenize_path(canonical_path), default)


def find_paths_for_key(document: Any, key_name: str, max_matches: int = DEFAULT_MAX_MATCHES) -> List[str]:
    """
    Depth first search for every object entry named key_name, returning their paths in traversal order.
    Containers reachable through more than one reference are only walked once.
    """
    matches = []
    visited = set()

    def walk(value: Any, path: str) -> None:
        if len(matches) >= max_matches:
            return
        if not isinstance(value, (dict, list)):
            return
        if id(value) in visited:
            return
        visited.add(id(value))

        if isinstance(value, list):
            for index, item in enumerate(value):
                walk(item, f"{path}[{index}]")
                if len(matches) >= max_matches:
                    return
            return

        for key, item in value.items():
            next_path = f"{path}.{key}"
            if key == key_name:
                matches.append(next_path)
            walk(item, next_path)
            if len(matches) >= max_matches:
                return

    walk(document, ROOT_PATH)
    return matches


def infer_path_from_free_text(dropped_text: Optional[str], selected_base_path: Optional[str], document: Any) -> str:
    """
    Turns text supplied by a user into a canonical path.
    A bare key such as `id`, `"id"`, `.id` or `$.id` is scoped to the selected base object when one is selected,
    otherwise it is looked up in the document and accepted if it occurs exactly once.
    Raises AmbiguousPathError if a bare key occurs more than once and no base object is selected.
    """
    trimmed = str(dropped_text or "").strip()
    unquoted = _strip_quotes(trimmed).strip()
    if not unquoted:
        return ""

    base_path = str(selected_base_path or "").strip()
    key_match = BARE_KEY_PATTERN.match(unquoted)

    if key_match and base_path and base_path != ROOT_PATH:
        return normalize_path(f"{base_path}.{key_match.group(1)}")

    if key_match and document is not None:
        key_name = key_match.group(1)
        found = find_paths_for_key(document, key_name)
        if len(found) == 1:
            return normalize_path(found[0])
        if len(found) > 1:
            raise AmbiguousPathError(key_name, found)

    return normalize_path(unquoted)

