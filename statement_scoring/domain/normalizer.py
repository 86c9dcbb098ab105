"""Row normalizer - resolve heterogeneous statement columns into canonical rows"""

import logging
import re
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from statement_scoring.domain.models import NormalizedRow, RawRecord
from statement_scoring.domain.strategies import Strategy, StrategyChain
from statement_scoring.utils.date_utils import UNKNOWN_DATE
from statement_scoring.utils.numbers import parse_amount

logger = logging.getLogger(__name__)

# Alias lists are matched in order; earlier entries win
AMOUNT_ALIASES: Tuple[str, ...] = (
    "amount",
    "transaction_amount",
    "transaction amount",
    "amount_inr",
    "amount (inr)",
    "amt",
    "value",
    "transaction value",
    "credit",
    "deposit",
    "debit",
    "withdrawal",
    "balance amount",
    "balance",
)
TYPE_ALIASES: Tuple[str, ...] = (
    "type",
    "transaction_type",
    "transaction type",
    "dr/cr",
    "cr/dr",
)
DESCRIPTION_ALIASES: Tuple[str, ...] = (
    "description",
    "narration",
    "particulars",
    "details",
    "transaction description",
    "remarks",
    "memo",
    "category",
)
DATE_ALIASES: Tuple[str, ...] = (
    "date",
    "transaction_date",
    "transaction date",
    "date_time",
    "value date",
    "date of transaction",
    "posting date",
)

CREDIT_COLUMNS = frozenset({"credit", "deposit"})
DEBIT_COLUMNS = frozenset({"debit", "withdrawal"})
TYPE_TOKENS = {"credit": "credit", "cr": "credit", "debit": "debit", "dr": "debit"}

# Larger magnitudes are account numbers or references, not amounts
MAX_SCANNED_AMOUNT = Decimal(100_000_000)
SCAN_EXCLUDED_NAME_PARTS = ("date", "id", "no")
DEFAULT_DESCRIPTION = "Transaction"

_WHITESPACE = re.compile(r"\s+")

Fields = Dict[str, str]
AmountMatch = Tuple[Decimal, str]


def fold_fields(record: RawRecord) -> Fields:
    """Trim and case-fold keys; the first of any colliding keys wins"""
    fields: Fields = {}
    for key, value in record.items():
        name = str(key).strip().casefold()
        fields.setdefault(name, "" if value is None else str(value).strip())
    return fields


def first_non_empty(fields: Fields, aliases: Iterable[str]) -> Optional[str]:
    for alias in aliases:
        value = fields.get(alias)
        if value:
            return value
    return None


def amount_from_aliases(fields: Fields) -> Optional[AmountMatch]:
    for alias in AMOUNT_ALIASES:
        amount = parse_amount(fields.get(alias))
        if amount is not None and amount != 0:
            return amount, alias
    return None


def amount_from_numeric_scan(fields: Fields) -> Optional[AmountMatch]:
    for name, value in fields.items():
        if any(part in name for part in SCAN_EXCLUDED_NAME_PARTS):
            continue
        amount = parse_amount(value)
        if amount is not None and amount != 0 and abs(amount) < MAX_SCANNED_AMOUNT:
            return amount, name
    return None


AMOUNT_CHAIN: StrategyChain[Fields, AmountMatch] = StrategyChain(
    [
        Strategy("alias_columns", amount_from_aliases),
        Strategy("numeric_scan", amount_from_numeric_scan),
    ]
)


def canonical_type(raw: str | None, amount_column: str | None = None) -> str:
    """
    Canonical declared-type token.

    A directional amount column (credit/deposit, debit/withdrawal) decides
    whenever the type text is not itself a credit/debit token.
    """
    token = ""
    if raw:
        token = _WHITESPACE.sub(" ", raw.strip().lower())
        token = TYPE_TOKENS.get(token, token)
        if token in ("credit", "debit"):
            return token
    if amount_column in CREDIT_COLUMNS:
        return "credit"
    if amount_column in DEBIT_COLUMNS:
        return "debit"
    return token


def normalize(record: RawRecord) -> Optional[NormalizedRow]:
    """
    Resolve one raw record into {date, description, amount, declared_type}.

    Returns None when no amount can be resolved; decorative and blank rows
    are expected in real statements and are not errors.
    """
    fields = fold_fields(record)
    match = AMOUNT_CHAIN.resolve(fields)
    if match is None:
        return None
    amount, amount_column = match

    type_text = first_non_empty(fields, TYPE_ALIASES)
    description = first_non_empty(fields, DESCRIPTION_ALIASES) or type_text or DEFAULT_DESCRIPTION

    return NormalizedRow(
        date=first_non_empty(fields, DATE_ALIASES) or UNKNOWN_DATE,
        description=_WHITESPACE.sub(" ", description).strip(),
        amount=amount,
        declared_type=canonical_type(type_text, amount_column),
    )


def normalize_records(records: Iterable[RawRecord]) -> List[NormalizedRow]:
    rows: List[NormalizedRow] = []
    dropped = 0
    for record in records:
        row = normalize(record)
        if row is None:
            dropped += 1
            continue
        rows.append(row)

    if dropped:
        logger.debug("Dropped %d records without a resolvable amount", dropped)
    return rows
