from __future__ import annotations

import re

_SECRET_VALUE_RE = re.compile(r"(?i)(api[_-]?key|token|secret|key)(\s*[=:]\s*)([^\s,;&\"']+)")
_AUTH_SCHEME_RE = re.compile(r"(?i)\b(bearer|key)(\s+)([A-Za-z0-9._\-:]{8,})")


def redact_string(s: str) -> str:
    redacted = _SECRET_VALUE_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}***", s)
    redacted = _AUTH_SCHEME_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}***", redacted)
    return redacted


def truncate(s: str, limit: int = 500) -> str:
    if len(s) <= limit:
        return s
    return f"{s[:limit]}...[{len(s) - limit} more chars]"
