from __future__ import annotations

import hashlib
import re

import pytest

from address_validator.core.normalizer import AddressNormalizer, normalize_input
from address_validator.services.validator_service import generate_cache_key


@pytest.fixture
def normalizer() -> AddressNormalizer:
    return AddressNormalizer()


@pytest.mark.parametrize(
    "raw, normalized, changes",
    [
        ("123 Main Stret", "123 Main street", ["Stret → street (typo correction)"]),
        ("456 Oak Ave", "456 Oak avenue", ["Ave → avenue"]),
        (
            "789 Park Blvd, San Fransisco",
            "789 Park boulevard, San francisco",
            ["Blvd → boulevard", "Fransisco → francisco (city correction)"],
        ),
        (
            "100 Elm St, Austin, texs",
            "100 Elm street, Austin, TX",
            ["St → street", "texs → TX (state)"],
        ),
        ("123 Main Street", "123 Main Street", []),
    ],
)
def test_normalize_scenarios(normalizer, raw, normalized, changes):
    n = normalizer.normalize(raw)
    assert n.original == raw
    assert n.normalized == normalized
    assert n.changes == changes


def test_directions_and_dotted_abbreviations(normalizer):
    n = normalizer.normalize("500 N Main St.")
    assert n.normalized == "500 north Main street"
    assert n.changes == ["N → north", "St. → street"]


def test_full_state_name_after_comma(normalizer):
    n = normalizer.normalize("123 Main Street, Springfield, California")
    assert n.normalized == "123 Main Street, Springfield, CA"
    assert n.changes == ["California → CA (state)"]


def test_state_abbreviation_already_canonical(normalizer):
    n = normalizer.normalize("1 Main Street, San Francisco, CA")
    assert n.changes == []


def test_common_words_are_not_typo_corrected(normalizer):
    # 'park' is 2 edits from 'walk', 'lake' 1 edit from 'lane'
    n = normalizer.normalize("12 Park Lake Road")
    assert n.normalized == "12 Park Lake Road"
    assert n.changes == []


def test_typo_correction_keeps_trailing_period(normalizer):
    n = normalizer.normalize("10 Main Stret.")
    assert n.normalized == "10 Main street."
    assert n.changes == ["Stret. → street. (typo correction)"]


def test_city_correction_drops_trailing_period(normalizer):
    n = normalizer.normalize("10 Fransisco.")
    assert n.normalized == "10 francisco"
    assert n.changes == ["Fransisco. → francisco (city correction)"]


def test_short_and_numeric_tokens_are_left_alone(normalizer):
    n = normalizer.normalize("12345 Elm Wy")
    assert n.normalized == "12345 Elm Wy"
    assert n.changes == []


def test_whitespace_is_collapsed_and_original_kept(normalizer):
    raw = "  123   Main\tStret  "
    n = normalizer.normalize(raw)
    assert n.original == raw
    assert n.normalized == "123 Main street"


@pytest.mark.parametrize(
    "raw",
    [
        "123 Main Stret",
        "456 Oak Ave",
        "789 Park Blvd, San Fransisco",
        "100 Elm St, Austin, texs",
        "500 N Main St.",
        "  42   W   Hwy 9,  Sacramento,   Californa ",
    ],
)
def test_normalization_invariants(normalizer, raw):
    n = normalizer.normalize(raw)
    assert n.original == raw
    assert n.normalized == n.normalized.strip()
    assert not re.search(r"\s{2,}", n.normalized)
    # idempotent: a normalized address needs no further changes
    assert normalizer.normalize(n.normalized).changes == []


def test_module_level_normalize_input():
    assert normalize_input("456 Oak Ave").normalized == "456 Oak avenue"


def test_cache_key():
    key = generate_cache_key("123 Main Street")
    assert key.startswith("addr:")
    assert re.fullmatch(r"addr:[0-9a-f]{32}", key)
    assert key == generate_cache_key("123 MAIN street")
    assert key != generate_cache_key("456 Oak Avenue")
    assert key == "addr:" + hashlib.md5(b"123 main street").hexdigest()
