"""
Parsing helpers for list-shaped model output and stored JSON columns
"""
import json
import logging
import re
from typing import Any, List, Optional

from ..config import FALLBACK_LIST_LIMIT
from .sanitizers import clean_model_text, normalize_text

logger = logging.getLogger(__name__)

# Greedy: first "[" to last "]"
JSON_ARRAY_PATTERN = re.compile(r'\[[\s\S]*\]')

# "1. ", "2)", "-", "• ", "* " at the start of a line; "3.5mm" and "**bold**" are kept
LIST_MARKER_PATTERN = re.compile(r"^\s*(?:\d+[.)](?!\d)\s*|[-•]+\s*|[*#>]+\s+)+")


def _as_string_list(items: List[Any]) -> List[str]:
    values = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, (dict, list)):
            item = json.dumps(item, ensure_ascii=False)
        text = normalize_text(str(item))
        if text:
            values.append(text)
    return values


def extract_json_list(text: str) -> Optional[List[str]]:
    """
    Find a JSON array embedded anywhere in the text
    Args:
        text: Raw completion text, e.g. 'Here you go: ["a", "b"]'
    Returns:
        The array items as strings, or None when there is no parseable array
    """
    if not text:
        return None

    match = JSON_ARRAY_PATTERN.search(text)
    if not match:
        return None

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.debug(f"Bracketed text is not valid JSON: {e}")
        return None

    if not isinstance(data, list):
        return None

    return _as_string_list(data)


def strip_list_marker(line: str) -> str:
    """Remove leading numbering or bullet markup from one line"""
    return LIST_MARKER_PATTERN.sub('', line).strip()


def split_list_lines(text: str, limit: int = FALLBACK_LIST_LIMIT) -> List[str]:
    """
    Fallback parser: one item per non-empty line
    Args:
        text: Raw completion text without a JSON array
        limit: Maximum number of items to keep
    Returns:
        Up to ``limit`` cleaned lines
    """
    items = []
    for line in (text or "").splitlines():
        if not line.strip() or line.strip().startswith("```"):
            continue
        item = strip_list_marker(line).rstrip(',').strip('"\'').strip()
        if item and item not in ("[", "]"):
            items.append(item)
    return items[:limit]


def parse_list_response(text: str, limit: int = FALLBACK_LIST_LIMIT) -> List[str]:
    """
    Parse bullet or keyword output: embedded JSON array first, lines second
    Args:
        text: Raw completion text
        limit: Item cap applied to the line fallback
    Returns:
        Parsed items
    """
    items = extract_json_list(text)
    if items is not None:
        return [clean_model_text(item) for item in items]
    return [clean_model_text(item) for item in split_list_lines(text, limit)]


def dump_json_list(values: Optional[List[str]]) -> str:
    """Serialize an ordered string list for a JSON text column"""
    return json.dumps(list(values or []), ensure_ascii=False)


def safe_json_list(value: Any) -> List[str]:
    """
    Decode a stored JSON list, failing soft
    Args:
        value: Column value (JSON text, an already-decoded list, or None)
    Returns:
        The decoded list, or [] when the payload is empty or malformed
    """
    if value is None:
        return []
    if isinstance(value, list):
        return _as_string_list(value)
    if not isinstance(value, str) or not value.strip():
        return []

    try:
        data = json.loads(value)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Malformed JSON list in storage, using empty list: {e}")
        return []

    if not isinstance(data, list):
        logger.warning(f"Stored JSON is {type(data).__name__}, not a list; using empty list")
        return []

    return _as_string_list(data)
