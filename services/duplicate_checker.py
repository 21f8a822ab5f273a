from repositories.credential_repository import CredentialRepository
from domain.candidate import CredentialCandidate
import logging

logger = logging.getLogger(__name__)

class DuplicateChecker:
    """
    Exact-duplicate rule: a credential is a duplicate only when all eleven content
    fields equal an existing credential of the same owner. Sharing platform and
    username with another record is allowed as long as any other field differs.
    Comparison is exact: no case folding or whitespace trimming.
    """

    def __init__(self, credential_repository: CredentialRepository):
        self.credential_repository = credential_repository

    def find_duplicate(self, user_id: int, candidate: CredentialCandidate, exclude_id: int | None = None):
        return self.credential_repository.find_exact_match(user_id, candidate.criteria(), exclude_id=exclude_id)

    def is_duplicate(self, user_id: int, candidate: CredentialCandidate, exclude_id: int | None = None) -> bool:
        match = self.find_duplicate(user_id, candidate, exclude_id=exclude_id)
        if match is not None:
            logger.info(f"DUPLICATE_CHECKER: Candidate for platform '{candidate.platform}' matches credential ID {match.id} of user_id {user_id}.")
            return True
        return False
