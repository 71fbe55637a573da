from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from rapidfuzz.distance import Levenshtein


# Ordered on purpose: fuzzy matching breaks ties by first-seen entry.
_STATES: tuple[tuple[str, str], ...] = (
    ("al", "alabama"), ("ak", "alaska"), ("az", "arizona"), ("ar", "arkansas"),
    ("ca", "california"), ("co", "colorado"), ("ct", "connecticut"), ("de", "delaware"),
    ("fl", "florida"), ("ga", "georgia"), ("hi", "hawaii"), ("id", "idaho"),
    ("il", "illinois"), ("in", "indiana"), ("ia", "iowa"), ("ks", "kansas"),
    ("ky", "kentucky"), ("la", "louisiana"), ("me", "maine"), ("md", "maryland"),
    ("ma", "massachusetts"), ("mi", "michigan"), ("mn", "minnesota"), ("ms", "mississippi"),
    ("mo", "missouri"), ("mt", "montana"), ("ne", "nebraska"), ("nv", "nevada"),
    ("nh", "new hampshire"), ("nj", "new jersey"), ("nm", "new mexico"), ("ny", "new york"),
    ("nc", "north carolina"), ("nd", "north dakota"), ("oh", "ohio"), ("ok", "oklahoma"),
    ("or", "oregon"), ("pa", "pennsylvania"), ("ri", "rhode island"), ("sc", "south carolina"),
    ("sd", "south dakota"), ("tn", "tennessee"), ("tx", "texas"), ("ut", "utah"),
    ("vt", "vermont"), ("va", "virginia"), ("wa", "washington"), ("wv", "west virginia"),
    ("wi", "wisconsin"), ("wy", "wyoming"), ("dc", "district of columbia"),
)

COMMON_STREET_TYPES: tuple[str, ...] = (
    "street", "avenue", "boulevard", "road", "drive", "lane", "court",
    "place", "way", "circle", "parkway", "terrace", "trail", "highway",
    "plaza", "alley", "bridge", "expressway", "freeway", "walk", "square",
)

COMMON_CITY_NAMES: tuple[str, ...] = (
    "new york", "los angeles", "chicago", "houston", "phoenix", "philadelphia",
    "san antonio", "san diego", "dallas", "san jose", "austin", "jacksonville",
    "fort worth", "columbus", "charlotte", "francisco", "indianapolis", "seattle",
    "denver", "washington", "boston", "el paso", "nashville", "detroit", "oklahoma",
    "portland", "las vegas", "memphis", "louisville", "baltimore", "milwaukee",
    "albuquerque", "tucson", "fresno", "mesa", "sacramento", "atlanta", "kansas",
    "colorado springs", "omaha", "raleigh", "miami", "long beach", "virginia beach",
    "oakland", "minneapolis", "tulsa", "tampa", "arlington", "new orleans",
)

_STREET_ABBREVIATIONS: tuple[tuple[str, str], ...] = (
    ("st", "street"), ("st.", "street"),
    ("ave", "avenue"), ("ave.", "avenue"), ("av", "avenue"),
    ("blvd", "boulevard"), ("blvd.", "boulevard"),
    ("rd", "road"), ("rd.", "road"),
    ("dr", "drive"), ("dr.", "drive"),
    ("ln", "lane"), ("ln.", "lane"),
    ("ct", "court"), ("ct.", "court"),
    ("pl", "place"), ("pl.", "place"),
    ("pkwy", "parkway"), ("pkwy.", "parkway"),
    ("ter", "terrace"), ("ter.", "terrace"),
    ("trl", "trail"), ("trl.", "trail"),
    ("hwy", "highway"), ("hwy.", "highway"),
    ("cir", "circle"), ("cir.", "circle"),
    ("sq", "square"), ("sq.", "square"),
    ("aly", "alley"), ("aly.", "alley"),
    ("expy", "expressway"), ("expy.", "expressway"),
    ("fwy", "freeway"), ("fwy.", "freeway"),
)

_DIRECTION_ABBREVIATIONS: tuple[tuple[str, str], ...] = (
    ("n", "north"), ("n.", "north"),
    ("s", "south"), ("s.", "south"),
    ("e", "east"), ("e.", "east"),
    ("w", "west"), ("w.", "west"),
    ("ne", "northeast"), ("ne.", "northeast"),
    ("nw", "northwest"), ("nw.", "northwest"),
    ("se", "southeast"), ("se.", "southeast"),
    ("sw", "southwest"), ("sw.", "southwest"),
)

# Real address words that sit within edit distance 2 of a street type
# ("park" ~ "walk", "lake" ~ "lane") and must not be "corrected".
COMMON_ADDRESS_WORDS: frozenset[str] = frozenset({
    "main", "park", "oak", "pine", "maple", "elm", "cedar", "lake", "hill", "view",
    "center", "first", "second", "third", "north", "south", "east", "west",
    "new", "old", "grand", "high", "spring",
})


@dataclass(frozen=True)
class AddressDictionary:
    """
    Read-only lookup tables used by the normalizer and the matcher.

    Keys of every mapping are lowercase. Sequences keep their declared order,
    which is what fuzzy matching uses for tie-breaks.
    """

    states_by_abbrev: Mapping[str, str]
    state_abbreviations: Mapping[str, str]
    street_types: tuple[str, ...]
    city_names: tuple[str, ...]
    street_abbreviations: Mapping[str, str]
    direction_abbreviations: Mapping[str, str]
    common_words: frozenset[str]

    @property
    def state_names(self) -> tuple[str, ...]:
        return tuple(self.state_abbreviations)


def _frozen_map(pairs: Iterable[tuple[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(pairs))


def build_default_dictionary() -> AddressDictionary:
    return AddressDictionary(
        states_by_abbrev=_frozen_map(_STATES),
        state_abbreviations=_frozen_map((name, abbr.upper()) for abbr, name in _STATES),
        street_types=COMMON_STREET_TYPES,
        city_names=COMMON_CITY_NAMES,
        street_abbreviations=_frozen_map(_STREET_ABBREVIATIONS),
        direction_abbreviations=_frozen_map(_DIRECTION_ABBREVIATIONS),
        common_words=COMMON_ADDRESS_WORDS,
    )


DEFAULT_DICTIONARY = build_default_dictionary()


def find_closest_match(word: str, dictionary: Iterable[str], max_distance: int) -> tuple[str, bool]:
    """
    Case-insensitive nearest entry with edit distance <= max_distance.

    Ties keep the first entry seen. Returns ("", False) when nothing qualifies.
    """
    word = word.lower()
    best_match = ""
    best_distance = max_distance + 1

    for candidate in dictionary:
        distance = Levenshtein.distance(word, candidate.lower(), score_cutoff=max_distance)
        if distance < best_distance and distance <= max_distance:
            best_distance = distance
            best_match = candidate

    return best_match, best_match != ""


def is_valid_us_state(state: str, dictionary: AddressDictionary = DEFAULT_DICTIONARY) -> bool:
    state = state.strip().lower()
    return state in dictionary.states_by_abbrev or state in dictionary.state_abbreviations


def normalize_us_state(state: str, dictionary: AddressDictionary = DEFAULT_DICTIONARY) -> tuple[str, bool]:
    """
    Abbreviation, full name or a close misspelling of a full name -> 2-letter code.

    'ca' -> ('CA', True), 'California' -> ('CA', True), 'californa' -> ('CA', True),
    'InvalidState' -> ('', False)
    """
    state = state.strip().lower()

    full_name = dictionary.states_by_abbrev.get(state)
    if full_name is not None:
        return dictionary.state_abbreviations[full_name], True

    abbr = dictionary.state_abbreviations.get(state)
    if abbr is not None:
        return abbr, True

    match, found = find_closest_match(state, dictionary.state_names, 2)
    if found:
        return dictionary.state_abbreviations[match], True

    return "", False
