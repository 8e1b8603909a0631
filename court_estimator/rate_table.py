# court_estimator/rate_table.py
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)


RateKey = Union[str, int]


@dataclass(frozen=True)
class RateRecord:
    id: Optional[int]
    name: str
    value: float
    category: Optional[str] = None
    unit: Optional[str] = None


def _normalise_name(name: str) -> str:
    return name.strip().lower()


@dataclass(frozen=True)
class RateTable:
    """
    Immutable lookup over the contractor's pricing records.

    Every lookup resolves to 0.0 when nothing matches, so a partial table
    still produces an estimate (with zero-cost lines) instead of an error.
    """
    records: Tuple[RateRecord, ...] = ()
    _by_name: Dict[str, RateRecord] = field(default_factory=dict, init=False, repr=False, compare=False)
    _by_id: Dict[int, RateRecord] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_name: Dict[str, RateRecord] = {}
        by_id: Dict[int, RateRecord] = {}
        for record in self.records:
            by_name[_normalise_name(record.name)] = record
            if record.id is not None:
                by_id[record.id] = record
        object.__setattr__(self, "_by_name", by_name)
        object.__setattr__(self, "_by_id", by_id)

    def __len__(self) -> int:
        return len(self.records)

    def get_price_by_name(self, name: Optional[str]) -> float:
        if not name:
            return 0.0
        record = self._by_name.get(_normalise_name(name))
        return record.value if record else 0.0

    def get_price_by_id(self, rate_id: Optional[int]) -> float:
        record = self._by_id.get(rate_id) if rate_id is not None else None
        return record.value if record else 0.0

    def get_prices_by_category(self, category: str) -> List[RateRecord]:
        return [r for r in self.records if r.category == category]

    def has(self, key: RateKey) -> bool:
        if isinstance(key, int):
            return key in self._by_id
        return _normalise_name(key) in self._by_name

    def missing(self, keys: Iterable[RateKey]) -> List[RateKey]:
        """Return the rate names/ids from ``keys`` that the table does not define."""
        return [key for key in keys if not self.has(key)]


_FIELD_ALIASES: Mapping[str, Iterable[str]] = {
    "id": ("id", "rate_id"),
    "name": ("name", "description", "item"),
    "value": ("value", "price", "unit_price"),
    "category": ("category", "group"),
    "unit": ("unit", "uom"),
}


def _normalise_header(header: str) -> str:
    return header.strip().lower()


def _build_header_map(headers: Iterable[str]) -> Dict[str, str]:
    """
    Map canonical field names (id, name, value, ...) to the actual CSV header.

    This allows some flexibility in how the rate-table CSV is named.
    """
    normalised = {_normalise_header(h): h for h in headers}
    mapping: Dict[str, str] = {}
    for field_name, aliases in _FIELD_ALIASES.items():
        for alias in aliases:
            if alias in normalised:
                mapping[field_name] = normalised[alias]
                break
    required = ("name", "value")
    missing = [f for f in required if f not in mapping]
    if missing:
        raise ValueError(
            f"Rate table CSV is missing required columns: {', '.join(missing)}"
        )
    return mapping


def _parse_id(raw: Any, where: str) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: invalid id '{raw}'") from exc


def _parse_value(raw: Any, where: str) -> float:
    if raw is None or raw == "":
        raise ValueError(f"{where}: missing value/price")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: invalid value '{raw}'") from exc


def rate_table_from_records(records: Sequence[Union[RateRecord, Mapping[str, Any]]]) -> RateTable:
    """
    Build a RateTable from the ``{id, name, category, value, unit}`` records
    served by the pricing endpoint. RateRecord instances are taken as-is.
    """
    parsed: List[RateRecord] = []
    for idx, raw in enumerate(records):
        if isinstance(raw, RateRecord):
            parsed.append(raw)
            continue

        where = f"Record {idx}"
        name = str(raw.get("name") or "").strip()
        if not name:
            raise ValueError(f"{where}: missing name")

        parsed.append(
            RateRecord(
                id=_parse_id(raw.get("id"), where),
                name=name,
                value=_parse_value(raw.get("value"), f"{where} ({name})"),
                category=raw.get("category") or None,
                unit=raw.get("unit") or None,
            )
        )

    return RateTable(records=tuple(parsed))


def load_rate_table(path: str | Path) -> RateTable:
    """
    Load a rate-table CSV into a RateTable.

    The CSV must include, at minimum, columns for:
      - name
      - value

    ``id``, ``category`` and ``unit`` are optional. Column names are matched
    case-insensitively and with a few common aliases (for example, 'price' is
    accepted for 'value').
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rate table CSV not found: {path}")

    records: List[RateRecord] = []
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError("Rate table CSV has no header row")

        header_map = _build_header_map(reader.fieldnames)

        for idx, row in enumerate(reader, start=2):  # 1-based + header
            def get(field_name: str, default: str = "") -> str:
                header = header_map.get(field_name)
                return (row.get(header, default) or "").strip() if header else default

            name = get("name")
            if not name:
                # Skip completely blank lines
                if not any(value.strip() for value in row.values() if value):
                    continue
                raise ValueError(f"Row {idx}: missing name")

            where = f"Row {idx} ({name})"
            records.append(
                RateRecord(
                    id=_parse_id(get("id"), where),
                    name=name,
                    value=_parse_value(get("value"), where),
                    category=get("category") or None,
                    unit=get("unit") or None,
                )
            )

    logger.info("Loaded %d rates from %s", len(records), path)
    return RateTable(records=tuple(records))
