"""
Text and prompt sanitization.

TextNormalizer cleans extracted document text before section planning;
sanitize_prompt() neutralizes injection phrases before a prompt leaves
the process.
"""

from .prompt_sanitizer import count_filtered, sanitize_prompt
from .text_normalizer import TextNormalizer

__all__ = ["TextNormalizer", "sanitize_prompt", "count_filtered"]
