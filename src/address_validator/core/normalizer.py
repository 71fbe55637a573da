from __future__ import annotations

import logging

from address_validator.core.dictionary import (
    DEFAULT_DICTIONARY,
    AddressDictionary,
    find_closest_match,
    normalize_us_state,
)
from address_validator.core.models import NormalizedInput
from address_validator.core.text import is_numeric, normalize_query

log = logging.getLogger(__name__)

ARROW = "→"

MIN_TYPO_LENGTH = 4
MIN_CITY_LENGTH = 6
MAX_EDIT_DISTANCE = 2


class AddressNormalizer:
    """
    Free-form US address -> NormalizedInput.

    Three left-to-right passes over whitespace-split tokens:
      1. abbreviation expansion ('St' -> 'street', 'N.' -> 'north')
      2. typo correction against street types, then city names
      3. state normalization for tokens sitting in the state position
    Tokens that are not replaced keep their case.
    """

    def __init__(self, dictionary: AddressDictionary = DEFAULT_DICTIONARY) -> None:
        self._dict = dictionary

    def normalize(self, raw: str) -> NormalizedInput:
        changes: list[str] = []

        words = raw.split()
        words = self._expand_abbreviations(words, changes)
        words = self._correct_typos(words, changes)
        words = self._normalize_states(words, changes)

        normalized = normalize_query(" ".join(words))
        if changes:
            log.debug("Normalized %r -> %r (%d changes)", raw, normalized, len(changes))

        return NormalizedInput(original=raw, normalized=normalized, changes=changes)

    def _lookup_abbreviation(self, lower: str) -> str | None:
        expansion = self._dict.street_abbreviations.get(lower)
        if expansion is None:
            expansion = self._dict.direction_abbreviations.get(lower)
        return expansion

    def _expand_abbreviations(self, words: list[str], changes: list[str]) -> list[str]:
        out = list(words)
        for i, word in enumerate(out):
            expansion = self._lookup_abbreviation(word.lower())
            if expansion is not None:
                out[i] = expansion
                changes.append(f"{word} {ARROW} {expansion}")
                continue

            # 'Blvd,' / 'St.,': match without the separator, then put it back
            if word.endswith(","):
                bare = word.rstrip(",")
                expansion = self._lookup_abbreviation(bare.lower())
                if expansion is not None:
                    out[i] = expansion + ","
                    changes.append(f"{bare} {ARROW} {expansion}")
        return out

    def _correct_typos(self, words: list[str], changes: list[str]) -> list[str]:
        out = list(words)
        for i, word in enumerate(out):
            core = word.rstrip(",.").lower()
            if len(core) < MIN_TYPO_LENGTH or is_numeric(core):
                continue

            match, found = find_closest_match(core, self._dict.street_types, MAX_EDIT_DISTANCE)
            if found and core != match and core not in self._dict.common_words:
                suffix = ""
                if word.endswith(","):
                    suffix = ","
                elif word.endswith("."):
                    suffix = "."
                out[i] = match + suffix
                changes.append(f"{word} {ARROW} {match + suffix} (typo correction)")
                continue

            if len(core) >= MIN_CITY_LENGTH:
                match, found = find_closest_match(core, self._dict.city_names, MAX_EDIT_DISTANCE)
                if found and core != match:
                    # only a comma is carried over here, a trailing '.' is dropped
                    suffix = "," if word.endswith(",") else ""
                    out[i] = match + suffix
                    changes.append(f"{word} {ARROW} {match + suffix} (city correction)")
        return out

    def _normalize_states(self, words: list[str], changes: list[str]) -> list[str]:
        out = list(words)
        last = len(out) - 1
        for i, word in enumerate(out):
            core = word.rstrip(",.").lower()

            after_comma = i > 0 and out[i - 1].endswith(",")
            two_letters = len(core) == 2
            at_end = i == last

            likely_state = (two_letters and (after_comma or at_end)) or (after_comma and len(core) > 3)
            if not likely_state:
                continue

            abbr, found = normalize_us_state(core, self._dict)
            if found and word.lower() != abbr.lower():
                out[i] = abbr
                changes.append(f"{word} {ARROW} {abbr} (state)")
        return out


_default_normalizer = AddressNormalizer()


def normalize_input(raw: str) -> NormalizedInput:
    return _default_normalizer.normalize(raw)
