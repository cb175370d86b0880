"""Detect which CSV columns hold which transaction fields.

Bank exports disagree on header names ("Description", "Merchant Name",
"Payee", ...). Rather than asking the user for a mapping, the header row is
matched against an ordered list of keywords per logical field. Matching is
deterministic and order-sensitive: the first keyword that matches any header
wins, and headers are tried in their original order.
"""

import logging
from dataclasses import fields, replace
from typing import Optional, Sequence

from pennywise.domain.entities import ColumnMapping
from pennywise.domain.errors import MappingIncompleteError, ValidationError

logger = logging.getLogger(__name__)

# (field, keyword patterns in priority order, exact match only)
FIELD_PATTERNS: tuple[tuple[str, tuple[str, ...], bool], ...] = (
    ("date", ("date", "transaction_date", "transactiondate", "posted", "posting", "time"), False),
    ("amount", ("amount", "amt", "value", "sum", "total"), False),
    (
        "description",
        (
            "description",
            "merchant",
            "merchantname",
            "merchant_name",
            "vendor",
            "payee",
            "details",
            "memo",
            "narrative",
        ),
        False,
    ),
    ("type", ("type", "transaction_type", "direction", "credit/debit", "dr/cr"), False),
    (
        "location_name",
        ("locationname", "location_name", "location", "place", "city", "address"),
        False,
    ),
    # Exact only, so that e.g. "Location" or "Balance" never count as coordinates
    ("latitude", ("latitude", "lat"), True),
    ("longitude", ("longitude", "lng", "lon", "long"), True),
    ("category", ("category", "categoryname", "category_name", "tag"), False),
)


def _normalize(header: str) -> str:
    return header.strip().lower()


def _find_header(
    headers: Sequence[str], patterns: Sequence[str], exact_only: bool
) -> Optional[str]:
    normalized = [_normalize(h) for h in headers]
    for pattern in patterns:
        for original, header in zip(headers, normalized):
            if header == pattern or (not exact_only and pattern in header):
                return original
    return None


def detect_columns(headers: Sequence[str]) -> ColumnMapping:
    """Detect a column mapping from a CSV header row.

    Args:
        headers: Header strings as emitted by the CSV reader

    Returns:
        ColumnMapping with the original header text for every field that
        matched; unmatched fields are None
    """
    found = {}
    for field_name, patterns, exact_only in FIELD_PATTERNS:
        header = _find_header(headers, patterns, exact_only)
        if header is not None:
            found[field_name] = header
    return ColumnMapping(**found)


def mapping_from_dict(values: dict[str, Optional[str]]) -> ColumnMapping:
    """Build a ColumnMapping from a field -> header dict.

    Raises:
        ValidationError: If a key is not a known logical field
    """
    known = {f.name for f in fields(ColumnMapping)}
    unknown = set(values) - known
    if unknown:
        raise ValidationError(
            f"Unknown mapping fields: {', '.join(sorted(unknown))}. "
            f"Must be among: {', '.join(sorted(known))}"
        )
    return ColumnMapping(**{k: v for k, v in values.items() if v})


def resolve_mapping(
    headers: Sequence[str],
    explicit: Optional[ColumnMapping] = None,
    overrides: Optional[dict[str, Optional[str]]] = None,
) -> ColumnMapping:
    """Return the mapping an import should use.

    An explicit mapping is used verbatim. Otherwise the mapping is detected
    from ``headers`` and any ``overrides`` (field -> header) replace the
    detected columns for their fields.

    Raises:
        ValidationError: If both explicit and overrides are given, or an
            override names an unknown field or a header not in the file
        MappingIncompleteError: If date, amount or description cannot be resolved
    """
    if explicit is not None and overrides:
        raise ValidationError("Give either an explicit mapping or column overrides, not both")

    if explicit is not None:
        mapping = explicit
        logger.debug("Using explicit column mapping %s", mapping.as_dict())
    else:
        mapping = detect_columns(headers)
        logger.debug("Detected column mapping %s", mapping.as_dict())
        if overrides:
            chosen = mapping_from_dict(overrides).as_dict()
            absent = [h for h in chosen.values() if h not in headers]
            if absent:
                raise ValidationError(
                    f"Column '{absent[0]}' not found. "
                    f"Available columns: {', '.join(headers)}"
                )
            mapping = replace(mapping, **chosen)
            logger.debug("Column mapping after overrides %s", mapping.as_dict())

    missing = mapping.missing_required()
    if missing:
        raise MappingIncompleteError(
            missing=missing, detected=mapping.as_dict(), available=list(headers)
        )
    return mapping
