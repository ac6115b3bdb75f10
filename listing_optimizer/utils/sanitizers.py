"""
Text cleanup for scraped markup and model output
"""
import re

_DANGEROUS_BLOCKS = re.compile(r'<(script|style|iframe|object)[^>]*>.*?</\1>', re.IGNORECASE | re.DOTALL)
_DANGEROUS_TAGS = re.compile(r'<(?:embed|link|meta)[^>]*>', re.IGNORECASE)
_EVENT_HANDLERS = re.compile(r'\s+on\w+\s*=\s*(?:"[^"]*"|\'[^\']*\'|\S+)', re.IGNORECASE)
_CODE_FENCE_OPEN = re.compile(r'^```[a-zA-Z]*\s*')
_CODE_FENCE_CLOSE = re.compile(r'\s*```$')
_WRAPPING_QUOTES = (('"', '"'), ("'", "'"), ('“', '”'))


def normalize_text(content: str) -> str:
    """
    Collapse runs of whitespace (including non-breaking spaces) to one space
    Args:
        content: Raw text, usually from BeautifulSoup get_text()
    Returns:
        Single-line trimmed text
    """
    if not content:
        return ""
    content = content.replace(" ", " ").replace("&nbsp;", " ")
    return re.sub(r"\s+", " ", content).strip()


def strip_code_fences(content: str) -> str:
    """Remove a markdown code fence wrapped around the whole response"""
    if not content:
        return ""
    content = content.strip()
    content = _CODE_FENCE_OPEN.sub('', content)
    content = _CODE_FENCE_CLOSE.sub('', content)
    return content.strip()


def strip_wrapping_quotes(content: str) -> str:
    """Drop one pair of quotes around the whole text, e.g. a quoted title"""
    if len(content) < 2:
        return content
    for opening, closing in _WRAPPING_QUOTES:
        if content.startswith(opening) and content.endswith(closing):
            inner = content[1:-1]
            # Leave it alone if the quotes are part of the text itself
            if opening not in inner and closing not in inner:
                return inner.strip()
    return content


def sanitize_html(content: str) -> str:
    """
    Remove scripts, styles, event handlers and javascript: URLs
    Args:
        content: Model output that may be rendered by the UI
    Returns:
        Sanitized text
    """
    if not content:
        return content

    content = _DANGEROUS_BLOCKS.sub('', content)
    content = _DANGEROUS_TAGS.sub('', content)
    content = _EVENT_HANDLERS.sub('', content)
    content = re.sub(r'javascript:', '', content, flags=re.IGNORECASE)

    return content.strip()


def clean_model_text(content: str) -> str:
    """
    Turn a plain-text model response into display text
    Args:
        content: Raw completion text
    Returns:
        Trimmed text without fences, wrapping quotes or dangerous markup
    """
    text = strip_code_fences(content or "")
    text = strip_wrapping_quotes(text)
    return sanitize_html(text)
