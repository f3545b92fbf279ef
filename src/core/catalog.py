"""
Identifier Catalog
Maps pair identifiers to venue categories and produces the monitored set

Category resolution is a two-tier lookup:
1. Exact match in the explicit asset table (config.assets)
2. First matching range rule (inclusive bounds), else UNKNOWN

INDEX is only reachable through explicit table entries.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Any

from utils.exceptions import ConfigurationError
from utils.logger import get_logger


logger = get_logger(__name__)


class Category(str, Enum):
    """Venue class, determines which calendar rule applies"""
    CRYPTO = "crypto"
    FX_OR_COMMODITY = "fx_or_commodity"
    EQUITY = "equity"
    INDEX = "index"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> 'Category':
        """
        Raises:
            ConfigurationError: If value is not a known category
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Undefined asset category: {value!r}",
                error_code='UNKNOWN_CATEGORY',
                details={'valid': [c.value for c in cls]}
            )


@dataclass(frozen=True)
class Asset:
    symbol: str
    id: int
    name: str
    category: Category


@dataclass(frozen=True)
class RangeRule:
    """Inclusive [lower, upper] id range; upper=None means unbounded"""
    lower: int
    upper: Optional[int]
    category: Category

    def matches(self, identifier: int) -> bool:
        if identifier < self.lower:
            return False
        return self.upper is None or identifier <= self.upper


DEFAULT_RANGE_RULES: Sequence[RangeRule] = (
    RangeRule(0, 1000, Category.CRYPTO),
    RangeRule(5000, 5600, Category.FX_OR_COMMODITY),
    RangeRule(6000, None, Category.EQUITY),
)


_SINGLE_ID = re.compile(r'\d+')
_ID_RANGE = re.compile(r'(\d+)\s*-\s*(\d+)')


def expand_ranges(spec: Optional[str]) -> List[int]:
    """
    Parse an identifier list such as "0-17,5000-5600,6004".

    Tokens are single ids or inclusive ranges "A-B" (either order). Tokens
    that are not non-negative integers are dropped.

    Returns:
        Sorted, duplicate-free identifiers
    """
    if not spec:
        return []

    ids = set()
    for raw in spec.split(','):
        token = raw.strip()
        if not token:
            continue

        match = _ID_RANGE.fullmatch(token)
        if match:
            a, b = int(match.group(1)), int(match.group(2))
            ids.update(range(min(a, b), max(a, b) + 1))
            continue

        if _SINGLE_ID.fullmatch(token):
            ids.add(int(token))
            continue

        logger.debug(f"Dropping invalid identifier token: {token!r}")

    return sorted(ids)


def format_id_ranges(ids: Iterable[int]) -> str:
    """Compress sorted ids into "0-3,5,10-12" form for log lines"""
    ordered = sorted(set(ids))
    if not ordered:
        return "<none>"

    parts = []
    start = prev = ordered[0]
    for value in ordered[1:]:
        if value == prev + 1:
            prev = value
            continue
        parts.append(str(start) if start == prev else f"{start}-{prev}")
        start = prev = value
    parts.append(str(start) if start == prev else f"{start}-{prev}")
    return ",".join(parts)


class IdentifierCatalog:
    """
    Explicit id -> category table plus range-inference fallback.
    Pure data holder; swap the table or rules without touching the scheduler.
    """

    def __init__(
        self,
        assets: Iterable[Asset] = (),
        range_rules: Sequence[RangeRule] = DEFAULT_RANGE_RULES
    ):
        self._assets: Dict[int, Asset] = {}
        for asset in assets:
            if asset.id < 0:
                raise ConfigurationError(
                    f"Asset {asset.symbol} has negative id {asset.id}",
                    error_code='INVALID_ASSET_ID'
                )
            existing = self._assets.get(asset.id)
            if existing is not None and existing.category != asset.category:
                raise ConfigurationError(
                    f"Id {asset.id} listed as both {existing.category.value} "
                    f"({existing.symbol}) and {asset.category.value} ({asset.symbol})",
                    error_code='CONFLICTING_ASSET_ID'
                )
            self._assets.setdefault(asset.id, asset)
        self._range_rules = tuple(range_rules)

    @classmethod
    def from_mapping(
        cls,
        table: Mapping[str, Mapping[str, Any]],
        range_rules: Sequence[RangeRule] = DEFAULT_RANGE_RULES
    ) -> 'IdentifierCatalog':
        """
        Build from {symbol: {'id': int, 'name': str, 'category': str}}.

        Raises:
            ConfigurationError: On unknown categories or malformed entries
        """
        assets = []
        for symbol, entry in table.items():
            try:
                identifier = int(entry['id'])
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Asset {symbol} has no valid id",
                    error_code='INVALID_ASSET_ID',
                    original_error=e
                )
            assets.append(Asset(
                symbol=symbol,
                id=identifier,
                name=str(entry.get('name', symbol)),
                category=Category.parse(entry.get('category')),
            ))
        return cls(assets, range_rules)

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, identifier: int) -> bool:
        return identifier in self._assets

    def get(self, identifier: int) -> Optional[Asset]:
        return self._assets.get(identifier)

    def infer_category(self, identifier: int) -> Category:
        for rule in self._range_rules:
            if rule.matches(identifier):
                return rule.category
        return Category.UNKNOWN

    def category_of(self, identifier: int) -> Category:
        asset = self._assets.get(identifier)
        if asset is not None:
            return asset.category
        return self.infer_category(identifier)

    def ids(self) -> List[int]:
        """Every cataloged id, ascending"""
        return sorted(self._assets)

    def monitored_set(self, override_spec: Optional[str] = None) -> List[int]:
        """
        Identifiers to watch for the process lifetime.

        Args:
            override_spec: Range expression replacing the catalog; None or
                blank means the whole catalog

        Returns:
            Sorted, duplicate-free identifiers (possibly empty)
        """
        if override_spec and override_spec.strip():
            return expand_ranges(override_spec)
        return self.ids()
