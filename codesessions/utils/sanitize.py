import re

# Leading run of whitespace, backticks and standalone "python" hints, as left
# behind when a fenced code block or a console prompt is pasted as code.
# Identifiers such as python_version keep their prefix.
_LEADING_RE = re.compile(r"\A(?:[\s`]|(?i:python)\b)*")
_TRAILING_RE = re.compile(r"[\s`]*\Z")


def sanitize_code(code: str) -> str:
    """Strip code fences, a leading language hint and surrounding whitespace."""
    code = _LEADING_RE.sub("", code, count=1)
    code = _TRAILING_RE.sub("", code, count=1)
    return code
