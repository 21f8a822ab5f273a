from flask import Blueprint, request, session, current_app, jsonify, Response
from .decorators import login_required

from domain.candidate import blank_optionals_to_none
from domain.credential import to_internal
from services.csv_export_service import EXPORT_FILENAME

credentials_bp = Blueprint('credentials', __name__)


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@credentials_bp.route('', methods=['GET'])
@login_required
def list_credentials():
    credential_service = current_app.extensions['credential_service']
    user_id = session['user_id']
    search_term = request.args.get('q', '')

    credentials = credential_service.search_credentials(user_id, search_term)
    current_app.logger.info(f"CREDENTIALS_BP: list - user_id {user_id}, term '{search_term}', {len(credentials)} results.")
    return jsonify([credential.to_dict() for credential in credentials])


@credentials_bp.route('', methods=['POST'])
@login_required
def create_credential():
    credential_service = current_app.extensions['credential_service']
    user_id = session['user_id']

    data = blank_optionals_to_none(to_internal(_json_body()))
    credential = credential_service.create_credential(user_id, data)
    return jsonify(credential.to_dict()), 201


@credentials_bp.route('/<int:credential_id>', methods=['GET'])
@login_required
def get_credential(credential_id):
    credential_service = current_app.extensions['credential_service']
    credential = credential_service.get_credential(credential_id, session['user_id'])
    return jsonify(credential.to_dict())


@credentials_bp.route('/<int:credential_id>', methods=['PATCH'])
@login_required
def update_credential(credential_id):
    credential_service = current_app.extensions['credential_service']
    user_id = session['user_id']

    changes = blank_optionals_to_none(to_internal(_json_body()))
    credential = credential_service.update_credential(credential_id, user_id, changes)
    return jsonify(credential.to_dict())


@credentials_bp.route('/<int:credential_id>', methods=['DELETE'])
@login_required
def delete_credential(credential_id):
    credential_service = current_app.extensions['credential_service']
    credential_service.delete_credential(credential_id, session['user_id'])
    return jsonify(success=True, id=credential_id)


@credentials_bp.route('/bulk-delete', methods=['POST'])
@login_required
def bulk_delete_credentials():
    credential_service = current_app.extensions['credential_service']
    user_id = session['user_id']

    ids = _json_body().get('ids')
    if not isinstance(ids, list) or not all(isinstance(i, int) and not isinstance(i, bool) for i in ids):
        return jsonify(success=False, error="'ids' must be a list of integer credential ids"), 400

    deleted_ids, missing_ids = credential_service.delete_many(ids, user_id)
    return jsonify(success=not missing_ids, deleted=deleted_ids, notFound=missing_ids)


@credentials_bp.route('/csv', methods=['POST'])
@login_required
def import_csv():
    csv_import_service = current_app.extensions['csv_import_service']
    user_id = session['user_id']

    upload = request.files.get('file')
    if upload is None:
        current_app.logger.warning(f"CREDENTIALS_BP: import_csv - no file in request from user_id {user_id}.")
        return jsonify(success=False, message="No file uploaded"), 400

    current_app.logger.info(f"CREDENTIALS_BP: import_csv - user_id {user_id} uploaded '{upload.filename}'.")
    result = csv_import_service.import_csv(user_id, upload.stream)
    return jsonify(result.to_dict())


@credentials_bp.route('/export', methods=['GET'])
@login_required
def export_csv():
    csv_export_service = current_app.extensions['csv_export_service']
    output_csv_data = csv_export_service.export_csv(session['user_id'])

    return Response(
        output_csv_data,
        mimetype="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={EXPORT_FILENAME}",
            "Content-Type": "text/csv; charset=utf-8"
        }
    )


@credentials_bp.route('/health', methods=['GET'])
@login_required
def credential_health():
    health_service = current_app.extensions['health_service']
    return jsonify(health_service.summarize(session['user_id']))
