"""
Tests for settings.yaml overrides in src/config.py.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src import config  # noqa: E402


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    """Settings path; module constants are restored after the test."""
    for constant, _ in config._OVERRIDABLE.values():
        monkeypatch.setattr(config, constant, getattr(config, constant))
    return tmp_path / "settings.yaml"


def test_missing_file_applies_nothing(settings_file):
    assert config.load_settings(settings_file) == {}


def test_empty_file_applies_nothing(settings_file):
    settings_file.write_text("", encoding="utf-8")
    assert config.load_settings(settings_file) == {}


def test_overrides_are_applied_and_coerced(settings_file):
    settings_file.write_text(
        "document_keyword_count: 5\nwinnow_promotion: 2\nunknown_key: 1\n",
        encoding="utf-8",
    )

    applied = config.load_settings(settings_file)

    assert applied == {'DOCUMENT_KEYWORD_COUNT': 5, 'WINNOW_PROMOTION': 2.0}
    assert config.DOCUMENT_KEYWORD_COUNT == 5
    assert isinstance(config.WINNOW_PROMOTION, float)


def test_top_level_list_is_rejected(settings_file):
    settings_file.write_text("- winnow_promotion\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        config.load_settings(settings_file)


def test_unparseable_yaml_is_rejected(settings_file):
    settings_file.write_text("winnow_promotion: [1.5\n", encoding="utf-8")
    with pytest.raises(ValueError):
        config.load_settings(settings_file)


@pytest.mark.parametrize("content", [
    "winnow_promotion: fast\n",
    "document_keyword_count: 2.5\n",
    "min_training_examples_to_guess: true\n",
    "spacy_model_name: 3\n",
])
def test_wrong_types_are_rejected(settings_file, content):
    settings_file.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid value"):
        config.load_settings(settings_file)


def test_bad_value_applies_nothing(settings_file):
    before = config.DOCUMENT_KEYWORD_COUNT
    settings_file.write_text("document_keyword_count: 3\nwinnow_demotion: low\n", encoding="utf-8")

    with pytest.raises(ValueError):
        config.load_settings(settings_file)

    assert config.DOCUMENT_KEYWORD_COUNT == before
