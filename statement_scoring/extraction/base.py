"""Extractor protocol and the table-to-record conversion shared by structured formats"""

from typing import List, Protocol

import pandas as pd

from statement_scoring.domain.models import RawRecord

EMPTY_INPUT_HINT = (
    "File is empty or could not be parsed. Please ensure the file contains transaction data "
    "with columns like: date, amount, description, or transaction_type."
)


class Extractor(Protocol):
    """Turns the bytes of one statement file into loosely-typed records"""

    def extract(self, file_bytes: bytes) -> List[RawRecord]:
        ...


def records_from_frame(frame: pd.DataFrame) -> List[RawRecord]:
    """
    Convert a string-typed frame into records.

    Headers are trimmed and case-folded (first wins on collision); rows
    whose cells are all blank are dropped.
    """
    headers = [str(column).strip().casefold() for column in frame.columns]
    records: List[RawRecord] = []

    for values in frame.itertuples(index=False, name=None):
        cells = ["" if pd.isna(value) else str(value).strip() for value in values]
        if not any(cells):
            continue
        record: RawRecord = {}
        for header, cell in zip(headers, cells):
            record.setdefault(header, cell)
        records.append(record)

    return records
