from repositories.credential_repository import CredentialRepository
from services.duplicate_checker import DuplicateChecker
from services.errors import AuthenticationError, DuplicateError, NotFoundError, ValidationError
from utilities.validation_util import ValidationUtility
from domain.candidate import CredentialCandidate
from domain.credential import CONTENT_FIELDS, DEFAULT_STATUS, Credential, utcnow
import logging

logger = logging.getLogger(__name__)

DUPLICATE_ON_CREATE = "This credential already exists (exact duplicate with all fields matching)"
DUPLICATE_ON_UPDATE = "These changes would create a duplicate credential"
NOT_FOUND = "Credential not found or you don't have permission to access it"


def require_user(user_id) -> int:
    if user_id is None:
        raise AuthenticationError("Authentication required")
    return user_id


class CredentialService:
    def __init__(self, credential_repository: CredentialRepository, duplicate_checker: DuplicateChecker,
                 clock=utcnow):
        self.credential_repository = credential_repository
        self.duplicate_checker = duplicate_checker
        self.clock = clock

    @staticmethod
    def _content_only(data: dict) -> dict:
        return {key: value for key, value in data.items() if key in CONTENT_FIELDS}

    def get_credential(self, credential_id: int, user_id: int) -> Credential:
        require_user(user_id)
        credential = self.credential_repository.get_by_id(credential_id, user_id)
        if credential is None:
            logger.warning(f"CREDENTIAL_SERVICE (get): Credential ID {credential_id} not found for user_id {user_id}.")
            raise NotFoundError(NOT_FOUND)
        return credential

    def create_credential(self, user_id: int, data: dict) -> Credential:
        """
        Validates and stores a new credential. Optional fields missing from `data` are stored as NULL
        and take part in the duplicate check as NULL.
        """
        require_user(user_id)
        payload = self._content_only(data)
        payload.setdefault('status', DEFAULT_STATUS)

        field_errors = ValidationUtility.validate_credential(payload)
        if field_errors:
            logger.warning(f"CREDENTIAL_SERVICE (create): Validation failed for user_id {user_id}: {sorted(field_errors)}")
            raise ValidationError(field_errors)

        candidate = CredentialCandidate.from_mapping(payload).resolved()
        if self.duplicate_checker.is_duplicate(user_id, candidate):
            logger.info(f"CREDENTIAL_SERVICE (create): Rejected exact duplicate for user_id {user_id}, platform '{candidate.platform}'.")
            raise DuplicateError(DUPLICATE_ON_CREATE)

        credential = self.credential_repository.add_credential(
            user_id=user_id, last_changed=self.clock(), **candidate.as_dict()
        )
        logger.info(f"CREDENTIAL_SERVICE (create): Credential ID {credential.id} created for user_id {user_id}, platform: {credential.platform}")
        return credential

    def update_credential(self, credential_id: int, user_id: int, changes: dict) -> Credential:
        """
        Partial update. Keys present in `changes` overwrite the stored values (None clears an
        optional field); keys not present keep their current values. The merged record must not
        equal any *other* credential of the user. Re-applying the same update is a no-op success.
        """
        existing = self.get_credential(credential_id, user_id)

        ignored = sorted(set(changes) - set(CONTENT_FIELDS))
        if ignored:
            logger.warning(f"CREDENTIAL_SERVICE (update): Ignoring non-content fields {ignored} for ID {credential_id}.")
        payload = self._content_only(changes)

        field_errors = ValidationUtility.validate_credential(payload, partial=True)
        if field_errors:
            logger.warning(f"CREDENTIAL_SERVICE (update): Validation failed for ID {credential_id}, user_id {user_id}: {sorted(field_errors)}")
            raise ValidationError(field_errors)

        effective = CredentialCandidate.from_credential(existing).overlay(payload)
        if self.duplicate_checker.is_duplicate(user_id, effective, exclude_id=existing.id):
            logger.info(f"CREDENTIAL_SERVICE (update): Update of ID {credential_id} would duplicate another credential of user_id {user_id}.")
            raise DuplicateError(DUPLICATE_ON_UPDATE)

        updated = self.credential_repository.update_credential(
            credential_id, user_id, last_changed=self.clock(), **payload
        )
        if updated is None:
            raise NotFoundError(NOT_FOUND)
        logger.info(f"CREDENTIAL_SERVICE (update): Credential ID {credential_id} updated for user_id {user_id}. Fields: {sorted(payload)}")
        return updated

    def delete_credential(self, credential_id: int, user_id: int) -> None:
        require_user(user_id)
        deleted = self.credential_repository.delete_credential(credential_id, user_id)
        if deleted is None:
            logger.warning(f"CREDENTIAL_SERVICE (delete): Credential ID {credential_id} not found for user_id {user_id}.")
            raise NotFoundError(NOT_FOUND)

    def delete_many(self, credential_ids: list[int], user_id: int) -> tuple[list[int], list[int]]:
        """
        Deletes each id on its own; ids that are not owned are reported back instead of raising.
        """
        require_user(user_id)
        deleted_ids, missing_ids = [], []
        for credential_id in dict.fromkeys(credential_ids):
            try:
                self.delete_credential(credential_id, user_id)
                deleted_ids.append(credential_id)
            except NotFoundError:
                missing_ids.append(credential_id)
        logger.info(f"CREDENTIAL_SERVICE (delete_many): user_id {user_id} deleted {len(deleted_ids)}, missing {len(missing_ids)}.")
        return deleted_ids, missing_ids

    def search_credentials(self, user_id: int, query: str | None) -> list[Credential]:
        require_user(user_id)
        search_term = query or ""
        return self.credential_repository.search_for_user(user_id, search_term)
