"""
TextNormalizer: prepare extracted document text for section planning.

Text arrives from the file-parsing service (PDF/DOC/RTF extraction) and
often carries encoding corruption and stray control characters. The
planner's guarantees hold over the normalized text this returns.

Stages:
1. Page breaks (form feed, vertical tab) -> space
2. Fix mojibake using ftfy
3. Normalize line endings (CRLF/CR -> LF)
4. Replace remaining control characters other than tab and newline
   with spaces, so words around them stay separate
"""

import re

import ftfy

from boothdocs.logging_config import debug_log

# Form feed and vertical tab separate pages in PDF extraction
_PAGE_BREAKS = re.compile(r"[\f\v]")
# C0 controls except \t (0x09) and \n (0x0A), plus DEL and C1 controls
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")


class TextNormalizer:
    """
    Normalize extracted text before analysis.

    Example:
        normalizer = TextNormalizer()
        clean = normalizer.normalize(raw_text)
    """

    def __init__(self, fix_encoding: bool = True):
        """
        Args:
            fix_encoding: If True, repair mojibake with ftfy
        """
        self.fix_encoding = fix_encoding

    def normalize(self, text: str) -> str:
        """
        Run all normalization stages.

        Args:
            text: Raw extracted text

        Returns:
            Normalized text (may be empty)
        """
        if not text:
            return ""

        original_len = len(text)

        text = _PAGE_BREAKS.sub(" ", text)

        if self.fix_encoding:
            # Keep ftfy away from line breaks and quotes; later stages own those
            text = ftfy.fix_text(text, fix_line_breaks=False, uncurl_quotes=False)

        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = _CONTROL_CHARS.sub(" ", text)

        if len(text) != original_len:
            debug_log(f"[TextNormalizer] {original_len} -> {len(text)} chars")

        return text
