from flask import jsonify, current_app
from werkzeug.exceptions import RequestEntityTooLarge

from services.errors import VaultError, ValidationError, CsvProcessingError


def register_error_handlers(app):
    @app.errorhandler(VaultError)
    def handle_vault_error(error: VaultError):
        body = {"success": False, "error": error.message}
        if isinstance(error, ValidationError):
            body["fields"] = error.field_errors
        if isinstance(error, CsvProcessingError):
            body["message"] = "Failed to process CSV file"
            body["errorReport"] = f"CSV Processing Error\n\n{error.message}"
        current_app.logger.info(f"ERRORS: {type(error).__name__} -> {error.status_code}: {error.message}")
        return jsonify(body), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        limit = current_app.config.get('MAX_CONTENT_LENGTH')
        current_app.logger.warning(f"ERRORS: Upload rejected, larger than {limit} bytes.")
        return jsonify(success=False, error=f"Upload exceeds the {limit} byte limit"), 413
