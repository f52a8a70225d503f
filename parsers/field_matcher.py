"""
Field matcher.

Maps extracted pairs onto catalog spec fields. Each tier is a strategy with
one method, try_match(pair, field), tried in priority order:

    AliasTier    95        learned alias for the normalized key
    ExactTier    100 / 92  exact name / name without its unit qualifier
    SynonymTier  82-72     abbreviation, curated synonym, containment
    FuzzyTier    40-59     significant-token overlap

The first tier that produces any candidate decides the pair. Within that
tier the highest score wins; ties go to catalog order. A pair no tier can
place goes to unmatched_pairs.
"""

from dataclasses import dataclass, field
from typing import Optional
import structlog
from rapidfuzz.distance import Levenshtein

from config.smart_paste import (
    ABBREVIATION_MATCH,
    ALIAS_HIT,
    COMMON_ALIASES,
    CONTAINMENT_MATCH,
    CROSS_CATEGORY_PENALTY,
    EXACT_BASE_NAME,
    EXACT_MATCH,
    FUZZY_CEILING,
    FUZZY_FLOOR,
    SHARED_FIELDS,
    SYNONYM_MATCH,
)
from models.smart_paste import MatchTier, RawPair, SpecCatalog, SpecFieldDef
from utils.text_utils import (
    expand_abbreviations,
    normalize_key,
    significant_tokens,
    strip_unit_qualifier,
)

logger = structlog.get_logger(__name__)

# Whole-string similarity needed before two short keys count as a fuzzy hit
SHORT_KEY_SIMILARITY = 0.75


# ===================
# PREPARED INPUTS
# ===================

@dataclass(frozen=True)
class PreparedKey:
    """A key in every normalized form the tiers compare on."""
    normalized: str
    base: str
    expanded: str
    tokens: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> "PreparedKey":
        base = normalize_key(strip_unit_qualifier(text)) or normalize_key(text)
        expanded = expand_abbreviations(base)
        return cls(
            normalized=normalize_key(text),
            base=base,
            expanded=expanded,
            tokens=tuple(significant_tokens(expanded)),
        )


@dataclass(frozen=True)
class PreparedPair:
    raw: RawPair
    index: int
    key: PreparedKey


@dataclass(frozen=True)
class IndexedField:
    """A catalog field plus its precomputed comparison forms."""
    definition: SpecFieldDef
    position: int
    categories: frozenset[str]
    key: PreparedKey
    synonyms: frozenset[str]

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def is_shared(self) -> bool:
        return self.key.base in SHARED_FIELDS or len(self.categories) > 1


class FieldIndex:
    """Catalog fields in catalog order, ready for matching."""

    def __init__(self, catalog: SpecCatalog):
        self.catalog = catalog
        self.fields: list[IndexedField] = []

        categories_by_name: dict[str, set[str]] = {}
        for category, definitions in catalog.categories.items():
            for definition in definitions:
                categories_by_name.setdefault(definition.name, set()).add(category)

        for position, definition in enumerate(catalog.all_fields()):
            key = PreparedKey.from_text(definition.name)
            self.fields.append(IndexedField(
                definition=definition,
                position=position,
                categories=frozenset(categories_by_name.get(definition.name, ())),
                key=key,
                synonyms=self._synonyms_for(key),
            ))

    @staticmethod
    def _synonyms_for(key: PreparedKey) -> frozenset[str]:
        synonyms = set()
        for canonical in {key.base, key.expanded}:
            for synonym in COMMON_ALIASES.get(canonical, []):
                normalized = normalize_key(synonym)
                synonyms.add(normalized)
                synonyms.add(expand_abbreviations(normalized))
        synonyms.discard(key.base)
        synonyms.discard(key.expanded)
        return frozenset(synonyms)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def __len__(self) -> int:
        return len(self.fields)


# ===================
# CANDIDATES
# ===================

@dataclass
class Candidate:
    """One pair proposed for one field."""
    spec_name: str
    value: str
    confidence: int
    source_key: str
    line_index: int
    tier: MatchTier
    pair_index: int = 0
    normalized_key: str = ""
    base_key: str = ""


@dataclass
class MatchOutcome:
    """Candidates (one per matched pair) plus the pairs nothing claimed."""
    candidates: list[Candidate] = field(default_factory=list)
    unmatched_pairs: list[RawPair] = field(default_factory=list)
    field_order: list[str] = field(default_factory=list)

    def grouped(self) -> dict[str, list[Candidate]]:
        """Candidates per spec name, in catalog order."""
        groups: dict[str, list[Candidate]] = {}
        for name in self.field_order:
            matches = [c for c in self.candidates if c.spec_name == name]
            if matches:
                groups[name] = matches
        return groups


# ===================
# TIER STRATEGIES
# ===================

class MatchStrategy:
    """Common interface for every matching tier."""

    tier: MatchTier

    def try_match(self, pair: PreparedPair, field: IndexedField) -> Optional[Candidate]:
        raise NotImplementedError

    def _candidate(self, pair: PreparedPair, field: IndexedField, confidence: int) -> Candidate:
        return Candidate(
            spec_name=field.name,
            value=pair.raw.value,
            confidence=max(0, min(100, confidence)),
            source_key=pair.raw.key,
            line_index=pair.raw.line_index,
            tier=self.tier,
            pair_index=pair.index,
            normalized_key=pair.key.normalized,
            base_key=pair.key.base,
        )


class AliasTier(MatchStrategy):
    """Key was confirmed by a reviewer earlier in the session."""

    tier = MatchTier.ALIAS

    def __init__(self, aliases: Optional[dict[str, str]] = None):
        # normalized source key -> spec name
        self.aliases = {normalize_key(k): v for k, v in (aliases or {}).items()}

    def try_match(self, pair: PreparedPair, field: IndexedField) -> Optional[Candidate]:
        if self.aliases.get(pair.key.normalized) == field.name:
            return self._candidate(pair, field, ALIAS_HIT)
        return None


class ExactTier(MatchStrategy):
    tier = MatchTier.EXACT

    def try_match(self, pair: PreparedPair, field: IndexedField) -> Optional[Candidate]:
        if not pair.key.normalized:
            return None
        if pair.key.normalized == field.key.normalized:
            return self._candidate(pair, field, EXACT_MATCH)
        # "Weight" vs "Weight (kg)"
        if pair.key.base == field.key.base:
            return self._candidate(pair, field, EXACT_BASE_NAME)
        return None


class SynonymTier(MatchStrategy):
    """Abbreviation expansion, curated synonyms, then containment."""

    tier = MatchTier.SYNONYM

    def try_match(self, pair: PreparedPair, field: IndexedField) -> Optional[Candidate]:
        key = pair.key
        if not key.expanded:
            return None
        if key.expanded == field.key.expanded:
            return self._candidate(pair, field, ABBREVIATION_MATCH)
        if key.base in field.synonyms or key.expanded in field.synonyms:
            return self._candidate(pair, field, SYNONYM_MATCH)
        if field.key.tokens and f" {field.key.expanded} " in f" {key.expanded} ":
            return self._candidate(pair, field, CONTAINMENT_MATCH)
        return None


def token_overlap_score(a: tuple[str, ...], b: tuple[str, ...]) -> int:
    """
    Fuzzy score for two significant-token lists.

    shared = exact tokens + 0.8 * near tokens (length >= 5, one edit apart);
    score = 40 + 19 * shared / max(len(a), len(b)). Returns 0 when nothing
    is shared, so the result stays in [40, 59] or is 0.
    """
    set_a, set_b = set(a), set(b)
    if not set_a or not set_b:
        return 0

    exact = len(set_a & set_b)
    rest_b = [t for t in set_b - set_a if len(t) >= 5]
    near = sum(
        1 for t in set_a - set_b
        if len(t) >= 5 and any(Levenshtein.distance(t, u) <= 1 for u in rest_b)
    )

    shared = exact + 0.8 * near
    if shared == 0:
        return 0
    ratio = min(1.0, shared / max(len(set_a), len(set_b)))
    return round(FUZZY_FLOOR + (FUZZY_CEILING - FUZZY_FLOOR) * ratio)


def string_similarity_score(a: str, b: str) -> int:
    """Whole-string fallback for keys too short to tokenize."""
    if not a or not b or min(len(a), len(b)) < 4:
        return 0
    ratio = Levenshtein.normalized_similarity(a, b)
    if ratio < SHORT_KEY_SIMILARITY:
        return 0
    return round(FUZZY_FLOOR + (FUZZY_CEILING - FUZZY_FLOOR) * ratio)


class FuzzyTier(MatchStrategy):
    """
    Significant-token overlap, capped below the Likely threshold.

    Fields outside the detected category lose CROSS_CATEGORY_PENALTY unless
    they are shared across categories.
    """

    tier = MatchTier.FUZZY

    def __init__(self, category: Optional[str] = None):
        self.category = category

    def try_match(self, pair: PreparedPair, field: IndexedField) -> Optional[Candidate]:
        score = token_overlap_score(pair.key.tokens, field.key.tokens)
        if not score:
            score = string_similarity_score(pair.key.expanded, field.key.expanded)
        if not score:
            return None

        if self.category and field.categories and self.category not in field.categories \
                and not field.is_shared:
            score -= CROSS_CATEGORY_PENALTY

        if score < FUZZY_FLOOR:
            return None
        return self._candidate(pair, field, min(score, FUZZY_CEILING))


def default_tiers(
    aliases: Optional[dict[str, str]] = None,
    category: Optional[str] = None
) -> list[MatchStrategy]:
    return [AliasTier(aliases), ExactTier(), SynonymTier(), FuzzyTier(category)]


# ===================
# MATCHING
# ===================

def best_candidate(
    pair: PreparedPair,
    index: FieldIndex,
    tiers: list[MatchStrategy]
) -> Optional[Candidate]:
    """Highest-scoring candidate from the first tier that produces one."""
    for tier in tiers:
        best = None
        for indexed in index.fields:
            candidate = tier.try_match(pair, indexed)
            if candidate and (best is None or candidate.confidence > best.confidence):
                best = candidate
        if best:
            return best
    return None


def match(
    pairs: list[RawPair],
    catalog: SpecCatalog,
    aliases: Optional[dict[str, str]] = None,
    category: Optional[str] = None,
    tiers: Optional[list[MatchStrategy]] = None
) -> MatchOutcome:
    """
    Match every pair against every catalog field.

    Matching is catalog-wide; category only tunes the fuzzy tier.

    Args:
        pairs: Extracted pairs in line order
        catalog: Spec catalog
        aliases: Learned aliases (normalized source key -> spec name)
        category: Detected category, if any
        tiers: Strategy override (defaults to alias, exact, synonym, fuzzy)

    Returns:
        MatchOutcome
    """
    index = FieldIndex(catalog)
    tiers = tiers if tiers is not None else default_tiers(aliases, category)
    outcome = MatchOutcome(field_order=index.field_names)

    for position, raw in enumerate(pairs):
        prepared = PreparedPair(raw=raw, index=position, key=PreparedKey.from_text(raw.key))
        candidate = best_candidate(prepared, index, tiers)
        if candidate:
            outcome.candidates.append(candidate)
        else:
            outcome.unmatched_pairs.append(raw)

    logger.debug(
        "pairs_matched",
        pairs=len(pairs),
        matched=len(outcome.candidates),
        unmatched=len(outcome.unmatched_pairs),
        catalog_fields=len(index),
        category=category
    )
    return outcome
