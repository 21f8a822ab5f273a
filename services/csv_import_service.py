from services.credential_service import CredentialService, require_user
from services.errors import CsvProcessingError, DuplicateError, ValidationError
from utilities.validation_util import ValidationUtility
from domain.credential import CSV_COLUMNS, DEFAULT_ACCOUNT_TYPE, DEFAULT_STATUS, EXTERNAL_NAMES, OPTIONAL_FIELDS
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator
import csv
import io
import logging

logger = logging.getLogger(__name__)

DUPLICATE_ROW_DETAILS = "Exact duplicate: A credential with identical values for all fields already exists"
UNKNOWN_PLATFORM = "unknown"


@dataclass
class ImportRowError:
    row: int
    platform: str
    details: str

    def to_dict(self) -> dict:
        return {"row": self.row, "platform": self.platform, "details": self.details}


@dataclass
class ImportResult:
    total: int = 0
    created: int = 0
    errors: list[ImportRowError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def error_report(self) -> str:
        """Plain-text summary for download; empty when every row was imported."""
        if not self.errors:
            return ""
        failure_rate = len(self.errors) / self.total * 100 if self.total else 0.0
        header = (
            "CSV Import Summary Report\n"
            f"Total Records Processed: {self.total}\n"
            f"Successfully Imported: {self.created}\n"
            f"Failed to Import: {len(self.errors)}\n"
            f"Failure Rate: {failure_rate:.1f}%\n\n"
            "Detailed Import Failures:\n"
            "Detailed Errors:\n"
        )
        blocks = [f"Row {err.row} ({err.platform}):\n{err.details}" for err in self.errors]
        return header + "\n\n".join(blocks)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "total": self.total,
            "created": self.created,
            "errors": [err.to_dict() for err in self.errors],
            "errorReport": self.error_report,
        }


class CsvImportService:
    """
    Row-by-row CSV import. Rows are handled strictly in file order and each accepted row is
    committed before the next one is examined, so a later row that repeats an earlier one
    is reported as a duplicate. A bad row never stops the batch, and nothing is rolled back.
    """

    ENCODING = "utf-8-sig"

    def __init__(self, credential_service: CredentialService):
        self.credential_service = credential_service

    @staticmethod
    def build_candidate_data(record: dict) -> dict:
        """
        Row values (camelCase columns) -> credential fields, with the import defaults applied:
        empty required text -> "", accountType -> "#1-TopPriority", status -> "Active",
        empty optional fields -> None.
        """
        def value_of(column: str) -> str:
            return record.get(column) or ""

        data = {
            'platform': value_of('platform'),
            'username': value_of('username'),
            'password': value_of('password'),
            'account_identity': value_of('accountIdentity'),
            'account_type': value_of('accountType') or DEFAULT_ACCOUNT_TYPE,
            'status': value_of('status') or DEFAULT_STATUS,
        }
        for name in OPTIONAL_FIELDS:
            data[name] = record.get(EXTERNAL_NAMES[name]) or None
        return data

    def _records(self, stream: BinaryIO) -> Iterator[dict]:
        try:
            text = stream.read().decode(self.ENCODING)
        except UnicodeDecodeError as e:
            raise CsvProcessingError(f"CSV file is not valid UTF-8 text: {e}") from e
        # No cell can be longer than the upload itself.
        if len(text) > csv.field_size_limit():
            csv.field_size_limit(len(text))

        text_stream = io.StringIO(text, newline="")
        try:
            reader = csv.DictReader(text_stream, skipinitialspace=True)
            if reader.fieldnames is None:
                raise CsvProcessingError("CSV file is empty or has no header row")
            reader.fieldnames = [name.strip() for name in reader.fieldnames]
            unknown_columns = [name for name in reader.fieldnames if name not in CSV_COLUMNS]
            if unknown_columns:
                logger.info(f"CSV_IMPORT: Ignoring unrecognised columns: {unknown_columns}")

            for raw in reader:
                yield {
                    key: value.strip() if isinstance(value, str) else value
                    for key, value in raw.items()
                    if key in CSV_COLUMNS
                }
        except csv.Error as e:
            raise CsvProcessingError(f"Malformed CSV: {e}") from e

    def import_csv(self, user_id: int, stream: BinaryIO) -> ImportResult:
        require_user(user_id)
        result = ImportResult()
        logger.info(f"CSV_IMPORT: Starting import for user_id {user_id}")

        for row_index, record in enumerate(self._records(stream), start=1):
            result.total = row_index
            self._import_row(user_id, row_index, record, result)

        logger.info(f"CSV_IMPORT: Finished for user_id {user_id}. Rows: {result.total}, created: {result.created}, failed: {len(result.errors)}")
        return result

    def _import_row(self, user_id: int, row_index: int, record: dict, result: ImportResult) -> None:
        platform_label = record.get('platform') or UNKNOWN_PLATFORM
        data = self.build_candidate_data(record)
        try:
            self.credential_service.create_credential(user_id, data)
        except ValidationError as e:
            details = ValidationUtility.format_field_errors(e.field_errors)
            logger.info(f"CSV_IMPORT: Row {row_index} ({platform_label}) rejected: {details}")
            result.errors.append(ImportRowError(row_index, platform_label, details))
        except DuplicateError:
            logger.info(f"CSV_IMPORT: Row {row_index} ({platform_label}) is an exact duplicate.")
            result.errors.append(ImportRowError(row_index, platform_label, DUPLICATE_ROW_DETAILS))
        else:
            result.created += 1
