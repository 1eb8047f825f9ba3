"""用户输入的清洗与校验。"""

import re
from typing import Optional

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")


def sanitize_input(text: str) -> str:
    """去掉 <script> 块与其余 HTML 标签。"""

    return _TAG_RE.sub("", _SCRIPT_RE.sub("", text)).strip()


def validation_error(text: str, max_length: int) -> Optional[str]:
    """空输入不算错误；超长时返回提示。"""

    stripped = text.strip()
    if len(stripped) > max_length:
        return f"Message is too long ({len(stripped)}/{max_length} characters)"
    return None


def can_send(text: str, max_length: int, in_flight: bool) -> bool:
    stripped = text.strip()
    return 0 < len(stripped) <= max_length and not in_flight
