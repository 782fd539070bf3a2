"""
Extract administrative locality tokens from free-text Korean addresses.

Two tokens are used for ranking stations: the district (구, "-gu") and
the neighborhood (동, "-dong"). Both Hangul and romanized spellings are
recognized, e.g. "서울특별시 강남구 역삼동 123" or "Gangnam-gu Yeoksam-dong".
"""

import re
from dataclasses import dataclass

# A Hangul run ending in 구 / 동 that is not glued to further Hangul
DISTRICT_PATTERNS = (
    re.compile(r"(?<![가-힣])([가-힣]+구)(?![가-힣])"),
    re.compile(r"\b([a-z]+-gu)\b", re.IGNORECASE),
)
NEIGHBORHOOD_PATTERNS = (
    re.compile(r"(?<![가-힣\d])([가-힣][가-힣\d]*동)(?![가-힣])"),
    re.compile(r"\b([a-z\d]+-dong)\b", re.IGNORECASE),
)


@dataclass(frozen=True)
class LocalityTokens:
    """District and neighborhood extracted from one address."""

    district: str | None = None
    neighborhood: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.district is None and self.neighborhood is None


EMPTY_LOCALITY = LocalityTokens()


def normalize_token(token: str) -> str:
    """Trim, collapse inner whitespace and casefold."""
    return " ".join(token.split()).casefold()


def _first_match(patterns, address) -> str | None:
    if not isinstance(address, str) or not address.strip():
        return None
    for pattern in patterns:
        match = pattern.search(address)
        if match:
            return normalize_token(match.group(1))
    return None


def extract_district(address: str | None) -> str | None:
    """
    Return the district token of an address, or None.

    Examples:
        "서울 강남구 테헤란로 152" -> "강남구"
        "Gangnam-gu Yeoksam-dong" -> "gangnam-gu"
    """
    return _first_match(DISTRICT_PATTERNS, address)


def extract_neighborhood(address: str | None) -> str | None:
    """
    Return the neighborhood token of an address, or None.

    Numbered administrative neighborhoods keep their digit ("역삼1동").
    Road-name addresses usually carry no neighborhood and yield None.
    """
    return _first_match(NEIGHBORHOOD_PATTERNS, address)


def parse_locality(address: str | None) -> LocalityTokens:
    """Extract both tokens; malformed input gives EMPTY_LOCALITY."""
    if not isinstance(address, str):
        return EMPTY_LOCALITY
    return LocalityTokens(
        district=extract_district(address),
        neighborhood=extract_neighborhood(address),
    )
