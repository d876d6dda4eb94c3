"""
Best-effort JSON extraction from model output

Language models wrap JSON in prose and code fences. Extraction prefers a
```json fenced block and otherwise parses the span from the first `{` to
the last `}`.
"""

import json
from typing import Any, Optional

FENCE_OPEN = "```json"
FENCE_CLOSE = "```"


def extract_first_json_value(text: str) -> Optional[Any]:
    """
    Extract a JSON value from free-form text.

    Returns None if nothing parses. A fenced block that fails to parse falls
    through to the brace-span attempt.
    """
    text = text.strip()
    if not text:
        return None

    start = text.find(FENCE_OPEN)
    if start >= 0:
        rest = text[start + len(FENCE_OPEN):]
        end = rest.find(FENCE_CLOSE)
        if end >= 0:
            try:
                return json.loads(rest[:end].strip())
            except json.JSONDecodeError:
                pass

    i = text.find("{")
    j = text.rfind("}")
    if i < 0 or j <= i:
        return None
    try:
        return json.loads(text[i:j + 1].strip())
    except json.JSONDecodeError:
        return None
