"""
Interest Guesser Configuration Module
Centralized configuration for the application.

Values defined here are defaults. A subset can be overridden from
config/settings.yaml (see load_settings()).
"""

import os
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "InterestGuesser"
APPDATA_DIR = Path(os.environ.get('APPDATA', os.path.expanduser('~/.config'))) / APP_NAME
LOGS_DIR = APPDATA_DIR / "logs"
DATA_DIR = APPDATA_DIR / "data"

# Ensure directories exist
for directory in [APPDATA_DIR, LOGS_DIR, DATA_DIR]:
    directory.mkdir(parents=True, exist_ok=True)

# Corpus repository (urls, documents and training log in a single JSON record)
REPOSITORY_FILE = Path(
    os.environ.get('INTEREST_GUESSER_REPOSITORY', str(DATA_DIR / "repository.json"))
)

# Search results used in place of a live search provider
DEFAULT_LINKS_FILE = Path(__file__).parent.parent / "data" / "sample_links.json"

# Keyword Extraction
# Number of corpus-wide "background" keywords seeded negatively into a signature
BACKGROUND_KEYWORD_COUNT = 10
# Number of document keywords shown to the user and added to the signature
DOCUMENT_KEYWORD_COUNT = 10

# Winnow Classifier
# Promotion factor (alpha > 1) and demotion factor (0 < beta < 1)
WINNOW_PROMOTION = 1.5
WINNOW_DEMOTION = 0.5
# Predict "interesting" when the weighted score is strictly above this
WINNOW_THRESHOLD = 1.0
# Training examples the corpus must hold before a guess is offered
MIN_TRAINING_EXAMPLES_TO_GUESS = 1

# Document Reader
HTTP_TIMEOUT_SECONDS = 15
HTTP_USER_AGENT = "Mozilla/5.0 (compatible; InterestGuesser/1.0)"
SPACY_MODEL_NAME = "en_core_web_sm"
# Max text size in characters handed to spaCy; longer bodies are truncated
READER_MAX_TEXT_CHARS = 200_000
# spaCy coarse POS tags that carry no topical signal
DROPPED_POS_TAGS = frozenset({
    "DET", "ADP", "PUNCT", "CCONJ", "SCONJ", "PRON",
    "ADV", "AUX", "PART", "SPACE", "SYM", "PROPN",
})

# Terminal Presentation
LINK_DISPLAY_WIDTH = 80

# Logging Configuration
LOG_FILE = LOGS_DIR / "processing.log"
DEBUG_LOG_FILE = LOGS_DIR / "debug_flow.txt"
LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# --- Settings Override System ---
SETTINGS_FILE = Path(__file__).parent.parent / "config" / "settings.yaml"

# Keys in settings.yaml mapped to the module constant they override and its type
_OVERRIDABLE = {
    'background_keyword_count': ('BACKGROUND_KEYWORD_COUNT', int),
    'document_keyword_count': ('DOCUMENT_KEYWORD_COUNT', int),
    'winnow_promotion': ('WINNOW_PROMOTION', float),
    'winnow_demotion': ('WINNOW_DEMOTION', float),
    'winnow_threshold': ('WINNOW_THRESHOLD', float),
    'min_training_examples_to_guess': ('MIN_TRAINING_EXAMPLES_TO_GUESS', int),
    'http_timeout_seconds': ('HTTP_TIMEOUT_SECONDS', float),
    'http_user_agent': ('HTTP_USER_AGENT', str),
    'spacy_model_name': ('SPACY_MODEL_NAME', str),
}


def _coerce_setting(key: str, value, expected: type, settings_file: Path):
    """Check one override against its type; ints are accepted for floats."""
    if isinstance(value, bool):
        ok = False
    elif expected is float:
        ok = isinstance(value, (int, float))
    else:
        ok = isinstance(value, expected)

    if not ok:
        raise ValueError(
            f"Invalid value for '{key}' in {settings_file}: "
            f"expected {expected.__name__}, got {value!r}"
        )
    return expected(value)


def load_settings(settings_file: Path = SETTINGS_FILE) -> dict:
    """
    Load overrides from settings.yaml and apply them to this module.

    Unknown keys are ignored. A missing file leaves the defaults in place.
    Nothing is applied unless every known key has a value of the right type.

    Args:
        settings_file: Path to the YAML settings file.

    Returns:
        The overrides that were applied.

    Raises:
        ValueError: If the file is not a YAML mapping or a value has the wrong type
    """
    if not settings_file.exists():
        return {}

    try:
        with open(settings_file, encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Cannot parse settings file {settings_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {settings_file} must hold a mapping of keys to values")

    applied = {}
    for key, value in data.items():
        if key not in _OVERRIDABLE or value is None:
            continue
        constant, expected = _OVERRIDABLE[key]
        applied[constant] = _coerce_setting(key, value, expected, settings_file)

    globals().update(applied)
    return applied


# Load settings on module import
load_settings()
# --- End Settings Override System ---
