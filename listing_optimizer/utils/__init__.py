"""
Utility modules for listing optimization
"""
from .sanitizers import normalize_text, clean_model_text, sanitize_html, strip_code_fences
from .validators import is_valid_asin, validate_asin
from .parsing import parse_list_response, extract_json_list, split_list_lines, safe_json_list, dump_json_list

__all__ = [
    "normalize_text",
    "clean_model_text",
    "sanitize_html",
    "strip_code_fences",
    "parse_list_response",
    "extract_json_list",
    "split_list_lines",
    "safe_json_list",
    "dump_json_list",
    "is_valid_asin",
    "validate_asin",
]
