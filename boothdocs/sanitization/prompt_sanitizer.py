"""
Prompt sanitization before text is sent to the generative backend.

Document text and user questions are untrusted: an exhibitor manual can
contain (deliberately or not) phrases that read as instructions to the
model. Code fences are stripped and common injection phrases and
chat-template tokens are replaced with [FILTERED].
"""

import re

FILTERED = "[FILTERED]"

INJECTION_PATTERNS = [
    re.compile(r"ignore\s+(previous|above|all)\s+(instructions?|prompts?)", re.IGNORECASE),
    re.compile(r"disregard\s+(previous|above|all)", re.IGNORECASE),
    re.compile(r"new\s+instructions?:", re.IGNORECASE),
    re.compile(r"system\s*:", re.IGNORECASE),
    re.compile(r"<\|im_start\|>", re.IGNORECASE),
    re.compile(r"<\|im_end\|>", re.IGNORECASE),
    re.compile(r"\[INST\]", re.IGNORECASE),
    re.compile(r"\[/INST\]", re.IGNORECASE),
]


def sanitize_prompt(text: str) -> str:
    """
    Remove code fences and neutralize injection patterns.

    Args:
        text: Prompt text about to be sent

    Returns:
        Sanitized prompt
    """
    sanitized = text.replace("```", "")
    for pattern in INJECTION_PATTERNS:
        sanitized = pattern.sub(FILTERED, sanitized)
    return sanitized


def count_filtered(text: str) -> int:
    """Number of injection matches sanitize_prompt() would replace."""
    return sum(len(pattern.findall(text)) for pattern in INJECTION_PATTERNS)
