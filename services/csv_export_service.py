from services.credential_service import CredentialService
from domain.credential import CONTENT_FIELDS, CSV_COLUMNS, EXTERNAL_NAMES
import csv
import io
import logging

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "credentials.csv"

class CsvExportService:
    def __init__(self, credential_service: CredentialService):
        self.credential_service = credential_service

    def export_csv(self, user_id: int) -> str:
        """
        Every credential of the user as CSV, newest first, in the same column layout the
        importer reads. NULL optional fields are written as empty cells.
        """
        credentials = self.credential_service.search_credentials(user_id, "")

        si = io.StringIO()
        writer = csv.DictWriter(si, fieldnames=CSV_COLUMNS, dialect='excel')
        writer.writeheader()
        for credential in credentials:
            writer.writerow({EXTERNAL_NAMES[name]: getattr(credential, name) for name in CONTENT_FIELDS})

        output_csv_data = si.getvalue()
        si.close()
        logger.info(f"CSV_EXPORT: Exported {len(credentials)} credentials for user_id {user_id}. Size: {len(output_csv_data)} chars.")
        return output_csv_data
