"""
BoothDocs Configuration Module
Centralized configuration for the document analysis pipeline.

Module-level constants are the defaults. A YAML file (config/analysis.yaml)
can override the analysis settings without touching code:

    from boothdocs.config import load_settings
    settings = load_settings()              # repo default file
    settings = load_settings("my.yaml")     # explicit file
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "BoothDocs"
APPDATA_DIR = Path(os.environ.get('APPDATA', os.path.expanduser('~/.config'))) / APP_NAME
LOGS_DIR = APPDATA_DIR / "logs"

# Generative-text backend
# The backend is the app's own generate route: it holds the organization's
# provider key server-side and answers {"response": "..."} or {"error": "..."}.
AI_API_BASE = os.environ.get('BOOTHDOCS_API_BASE', "http://localhost:3000")
AI_GENERATE_PATH = "/api/ai/generate"
AI_TIMEOUT_SECONDS = 120  # Per call; expiry counts as a transient network failure
AI_MAX_TOKENS = 4096

SYSTEM_PROMPT = (
    "You are an expert at analyzing trade show and exhibitor documents. "
    "Be thorough and precise."
)

# Document Chunking
# ~10k tokens; documents above this are split into sections
CHUNK_THRESHOLD_CHARS = 40000
# ~7.5k tokens per section, leaves headroom for the instruction template
MAX_CHUNK_CHARS = 30000
# How far back from the size bound a paragraph/sentence break may be taken
CHUNK_LOOKBACK_FRACTION = 0.3

# Retry / Backoff
RETRY_MAX_ATTEMPTS = 3
RETRY_BASE_DELAY_SECONDS = 1.0
RETRY_MAX_DELAY_SECONDS = 30.0
RETRY_JITTER_FRACTION = 0.25

# Logging Configuration
LOG_FILE = LOGS_DIR / "analysis.log"
LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# Default settings file shipped with the repo
SETTINGS_FILE = Path(__file__).parent.parent / "config" / "analysis.yaml"


@dataclass
class AnalysisSettings:
    """
    Tunable settings for one DocumentAnalyzer.

    Attributes:
        api_base: Base URL of the generate route
        timeout_seconds: Per-call timeout
        max_tokens: Output token budget per call
        chunk_threshold_chars: Documents longer than this are chunked
        max_chunk_chars: Size bound for each section
        lookback_fraction: Share of the bound searched backwards for a break
        max_attempts: Total attempts per backend call
        base_delay_seconds: First backoff delay
        max_delay_seconds: Ceiling for any single backoff delay
        jitter_fraction: Random spread applied to each delay
    """

    api_base: str = AI_API_BASE
    timeout_seconds: float = AI_TIMEOUT_SECONDS
    max_tokens: int = AI_MAX_TOKENS
    chunk_threshold_chars: int = CHUNK_THRESHOLD_CHARS
    max_chunk_chars: int = MAX_CHUNK_CHARS
    lookback_fraction: float = CHUNK_LOOKBACK_FRACTION
    max_attempts: int = RETRY_MAX_ATTEMPTS
    base_delay_seconds: float = RETRY_BASE_DELAY_SECONDS
    max_delay_seconds: float = RETRY_MAX_DELAY_SECONDS
    jitter_fraction: float = RETRY_JITTER_FRACTION

    def __post_init__(self):
        """Reject values the pipeline cannot run with."""
        if self.max_chunk_chars <= 0:
            raise ValueError(f"max_chunk_chars must be positive, got {self.max_chunk_chars}")
        if self.chunk_threshold_chars <= 0:
            raise ValueError(f"chunk_threshold_chars must be positive, got {self.chunk_threshold_chars}")
        if not 0 < self.lookback_fraction <= 1:
            raise ValueError(f"lookback_fraction must be in (0, 1], got {self.lookback_fraction}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")


def load_settings(path: Path | str | None = None) -> AnalysisSettings:
    """
    Load AnalysisSettings from a YAML file, falling back to module defaults.

    The file holds an ``analysis:`` mapping whose keys match AnalysisSettings
    fields. Unknown keys are ignored.

    Args:
        path: YAML file to read. If None, uses config/analysis.yaml.

    Returns:
        AnalysisSettings with file values applied over the defaults

    Raises:
        ValueError: If a value in the file is out of range
    """
    from boothdocs.logging_config import debug_log

    settings_path = Path(path) if path is not None else SETTINGS_FILE

    try:
        with open(settings_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        debug_log(f"[Config] Settings file not found at {settings_path}. Using defaults.")
        return AnalysisSettings()

    section = data.get('analysis', {}) or {}
    known = {f.name for f in fields(AnalysisSettings)}
    overrides = {k: v for k, v in section.items() if k in known}

    ignored = sorted(set(section) - known)
    if ignored:
        debug_log(f"[Config] Ignoring unknown settings keys: {ignored}")

    debug_log(f"[Config] Loaded {len(overrides)} settings from {settings_path}")
    return AnalysisSettings(**overrides)
