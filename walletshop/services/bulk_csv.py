# walletshop/services/bulk_csv.py
import csv
import io
from dataclasses import dataclass, field
from typing import Dict, List

from pydantic import ValidationError

from walletshop.domain.errors import BulkFileError
from walletshop.domain.schemas import BulkLineRecord
from walletshop.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("walletCode", "itemId", "quantity")
# ceny liczy serwer - plik z takimi kolumnami jest odrzucany w calosci
FORBIDDEN_COLUMNS = ("price", "unitPrice", "totalPrice")


@dataclass
class BulkCsvResult:
    records: List[BulkLineRecord] = field(default_factory=list)
    # wallet -> komunikat pierwszego zlego wiersza
    rejected: Dict[str, str] = field(default_factory=dict)


def _row_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    loc = ".".join(str(p) for p in first["loc"])
    return f"{loc}: {first['msg']}"


def parse_bulk_csv(content: bytes) -> BulkCsvResult:
    """
    CSV z naglowkiem -> rekordy linii.
    Tylko kolumny walletCode, itemId, quantity; inne kolumny sa ignorowane.
    Zly wiersz odrzuca tylko zamowienie swojego walleta.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise BulkFileError("CSV parse error: file is not valid UTF-8")

    reader = csv.DictReader(io.StringIO(text), skipinitialspace=True)
    header = [h.strip() for h in (reader.fieldnames or [])]
    reader.fieldnames = header

    forbidden = [c for c in FORBIDDEN_COLUMNS if c in header]
    if forbidden:
        raise BulkFileError(f"Column(s) not allowed: {', '.join(forbidden)}")

    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        raise BulkFileError(f"Missing column(s): {', '.join(missing)}")

    result = BulkCsvResult()
    try:
        for row_no, row in enumerate(reader, start=2):
            values = {c: (row.get(c) or "").strip() for c in REQUIRED_COLUMNS}
            if not any(values.values()):
                continue

            wallet_code = values["walletCode"]
            try:
                record = BulkLineRecord.model_validate(values)
            except ValidationError as e:
                result.rejected.setdefault(wallet_code, f"Invalid row {row_no}: {_row_error(e)}")
                continue

            result.records.append(record)
    except csv.Error as e:
        raise BulkFileError(f"CSV parse error: {e}")

    if result.rejected:
        result.records = [r for r in result.records if r.wallet_code not in result.rejected]
        logger.info(f"Bulk CSV: {len(result.rejected)} wallet(s) rejected by row validation")

    return result
