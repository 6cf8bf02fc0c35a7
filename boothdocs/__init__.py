"""
BoothDocs - AI analysis of trade show and exhibitor documents.

Subpackages:
- analysis: Chunked document analysis pipeline
- sanitization: Text normalization and prompt sanitization

Modules:
- assistant: Show content generation and connection check
- config / logging_config: Settings and unified logging
- main: Command-line entry point
"""

__version__ = "0.1.0"
