"""
Merchant normalizer for recurring transaction detection.

Canonicalizes raw merchant strings (as extracted from bank SMS messages)
into a pattern key so that "Netflix", "NETFLIX Inc" and "netflix.com" group
together.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Union

logger = logging.getLogger(__name__)

COMMON_PREFIXES: Sequence[str] = ("WWW", "HTTP", "HTTPS")

DOMAIN_EXTENSIONS: Sequence[str] = ("COM", "NET", "ORG", "IN", "CO", "IO")

BUSINESS_SUFFIXES: Sequence[str] = (
    "INC", "INCORPORATED",
    "LTD", "LIMITED",
    "PVT", "PRIVATE",
    "LLC", "LLP",
    "CO", "COMPANY", "CORP", "CORPORATION",
    "PLC", "GMBH", "SA", "AG",
)

_SPECIAL_CHARS = re.compile(r"[^A-Z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def _alternation(tokens: Iterable[str]) -> str:
    # Longest first so HTTPS is tried before HTTP
    return "|".join(sorted((re.escape(t) for t in tokens), key=len, reverse=True))


class MerchantNormalizer:
    """
    Normalizes merchant names into comparable pattern keys.

    Normalization steps, in order:
    1. Uppercase
    2. Replace every character that is not A-Z, 0-9 or whitespace with a space, then trim
    3. Remove leading prefixes (WWW, HTTP, HTTPS)
    4. Remove standalone domain extensions (COM, NET, ...) at the end or in the middle
    5. Remove trailing business suffixes (INC, LTD, PVT, ...)
    6. Collapse whitespace and trim

    Each removal step repeats until nothing changes, so stacked tokens
    ("SWIGGY INDIA PVT LTD") are fully removed and normalization is idempotent.
    """

    def __init__(
        self,
        prefixes: Sequence[str] = COMMON_PREFIXES,
        domain_extensions: Sequence[str] = DOMAIN_EXTENSIONS,
        business_suffixes: Sequence[str] = BUSINESS_SUFFIXES
    ):
        """
        Initialize the merchant normalizer.

        Args:
            prefixes: Leading tokens to strip
            domain_extensions: Standalone tokens to strip at the end or in the middle
            business_suffixes: Trailing legal-entity tokens to strip
        """
        self._prefix_re = re.compile(rf"^(?:{_alternation(prefixes)})\s+")
        domains = _alternation(domain_extensions)
        self._trailing_domain_re = re.compile(rf"\s+(?:{domains})\s*$")
        self._interior_domain_re = re.compile(rf"\s+(?:{domains})\s+")
        self._suffix_re = re.compile(rf"\s+(?:{_alternation(business_suffixes)})\s*$")

    def normalize(self, merchant: Optional[str]) -> str:
        """
        Normalize a merchant name for consistent matching.

        Examples:
            "Netflix"         -> "NETFLIX"
            "NETFLIX Inc"     -> "NETFLIX"
            "www.amazon.com"  -> "AMAZON"
            "HDFC Bank Ltd."  -> "HDFC BANK"

        Args:
            merchant: Raw merchant name from a transaction

        Returns:
            Normalized merchant pattern, or empty string if input is blank
        """
        if merchant is None or not merchant.strip():
            return ""

        normalized = _SPECIAL_CHARS.sub(" ", merchant.upper()).strip()

        normalized = self._remove_until_stable(self._prefix_re, "", normalized)

        normalized = self._remove_until_stable(self._trailing_domain_re, "", normalized)
        normalized = self._remove_until_stable(self._interior_domain_re, " ", normalized)

        normalized = self._remove_until_stable(self._suffix_re, "", normalized)

        return _WHITESPACE.sub(" ", normalized).strip()

    @staticmethod
    def _remove_until_stable(pattern: Pattern[str], replacement: str, value: str) -> str:
        while True:
            updated = pattern.sub(replacement, value)
            if updated == value:
                return value
            value = updated

    def matches(self, merchant1: Optional[str], merchant2: Optional[str]) -> bool:
        """True if both names normalize to the same pattern."""
        return self.normalize(merchant1) == self.normalize(merchant2)

    def matches_any(self, merchant: Optional[str], patterns: Iterable[str]) -> bool:
        """True if the merchant normalizes to the same pattern as any candidate."""
        normalized_merchant = self.normalize(merchant)
        return any(self.normalize(p) == normalized_merchant for p in patterns)

    def find_best_match(self, merchant: Optional[str], candidates: Iterable[str]) -> Optional[str]:
        """
        Return the first candidate that normalizes to the same pattern.

        Args:
            merchant: Merchant name to match
            candidates: Candidate names in priority order

        Returns:
            First matching candidate, or None
        """
        normalized_merchant = self.normalize(merchant)
        for candidate in candidates:
            if self.normalize(candidate) == normalized_merchant:
                return candidate
        return None

    def group_by_normalized(self, merchants: Iterable[Optional[str]]) -> Dict[str, List[str]]:
        """
        Group raw merchant names by their normalized form.

        Blank names are skipped.
        """
        groups: Dict[str, List[str]] = {}
        for merchant in merchants:
            if merchant is None or not merchant.strip():
                continue
            groups.setdefault(self.normalize(merchant), []).append(merchant)
        return groups

    def contains(self, merchant: Optional[str], keyword: str) -> bool:
        """True if the normalized keyword occurs inside the normalized merchant."""
        return self.normalize(keyword) in self.normalize(merchant)

    def matches_pattern(self, merchant: Optional[str], pattern: Union[str, Pattern[str]]) -> bool:
        """True if the regex finds a match in the normalized merchant."""
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        return pattern.search(self.normalize(merchant)) is not None


_DEFAULT_NORMALIZER = MerchantNormalizer()


def normalize(merchant: Optional[str]) -> str:
    """Normalize with the default token sets."""
    return _DEFAULT_NORMALIZER.normalize(merchant)


def matches(merchant1: Optional[str], merchant2: Optional[str]) -> bool:
    return _DEFAULT_NORMALIZER.matches(merchant1, merchant2)


def matches_any(merchant: Optional[str], patterns: Iterable[str]) -> bool:
    return _DEFAULT_NORMALIZER.matches_any(merchant, patterns)
