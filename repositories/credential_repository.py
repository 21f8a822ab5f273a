from domain.credential import Credential
from domain import db
import logging

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ('platform', 'account_name', 'username', 'account_identity', 'account_type')


class CredentialRepository:
    """
    All SQL touching the credentials table. Every statement is scoped to the owning user
    and commits on its own; callers never get a multi-statement transaction.
    """

    @staticmethod
    def _newest_first():
        return (Credential.last_changed.desc(), Credential.id.desc())

    def get_by_id(self, credential_id: int, user_id: int) -> Credential | None:
        return db.session.query(Credential).filter_by(id=credential_id, user_id=user_id).first()

    def get_all_for_user(self, user_id: int) -> list[Credential]:
        return (
            db.session.query(Credential)
            .filter_by(user_id=user_id)
            .order_by(*self._newest_first())
            .all()
        )

    def find_exact_match(self, user_id: int, criteria: dict[str, str | None],
                         exclude_id: int | None = None) -> Credential | None:
        """
        First owned credential whose columns equal `criteria` exactly.
        A None criterion matches only NULL columns; columns not named are unconstrained.
        """
        filters = [Credential.user_id == user_id]
        for field_name, value in criteria.items():
            column = getattr(Credential, field_name)
            filters.append(column.is_(None) if value is None else column == value)
        if exclude_id is not None:
            filters.append(Credential.id != exclude_id)
        return db.session.query(Credential).filter(*filters).first()

    def add_credential(self, **kwargs) -> Credential:
        if 'user_id' not in kwargs:
            logger.error("REPOSITORY: add_credential called without 'user_id'.")
            raise ValueError("user_id is required to add a credential.")
        try:
            new_credential = Credential(**kwargs)
            db.session.add(new_credential)
            db.session.commit()
            logger.info(f"REPOSITORY: Credential ID {new_credential.id} added. Platform: {new_credential.platform}, UserID: {new_credential.user_id}")
            return new_credential
        except Exception as e:
            db.session.rollback()
            logger.error(f"REPOSITORY: Failed to add credential for UserID {kwargs.get('user_id')}: {e}", exc_info=True)
            raise

    def update_credential(self, credential_id: int, user_id: int, **changes) -> Credential | None:
        """
        Applies `changes` to the owned credential and returns it, or None when
        no credential with that id belongs to the user.
        """
        credential = self.get_by_id(credential_id, user_id)
        if credential is None:
            return None
        try:
            for key, value in changes.items():
                if key in ('id', 'user_id'):
                    logger.warning(f"REPOSITORY: Ignoring attempt to change protected field '{key}' of credential ID {credential_id}.")
                    continue
                setattr(credential, key, value)
            db.session.commit()
            logger.info(f"REPOSITORY: Credential ID {credential_id} updated. UserID: {user_id}. Fields: {sorted(changes.keys())}")
            return credential
        except Exception as e:
            db.session.rollback()
            logger.error(f"REPOSITORY: Failed to update credential ID {credential_id} (UserID: {user_id}): {e}", exc_info=True)
            raise

    def delete_credential(self, credential_id: int, user_id: int) -> Credential | None:
        """
        Removes the owned credential permanently and returns the removed row,
        or None when nothing matched.
        """
        credential = self.get_by_id(credential_id, user_id)
        if credential is None:
            return None
        try:
            db.session.delete(credential)
            db.session.commit()
            logger.info(f"REPOSITORY: Credential ID {credential_id} (UserID: {user_id}) deleted.")
            return credential
        except Exception as e:
            db.session.rollback()
            logger.error(f"REPOSITORY: Failed to delete credential ID {credential_id} (UserID: {user_id}): {e}", exc_info=True)
            raise

    def search_for_user(self, user_id: int, search_term: str) -> list[Credential]:
        """
        Case-insensitive substring search over the searchable columns; a blank term returns everything.
        """
        query = db.session.query(Credential).filter(Credential.user_id == user_id)
        if search_term:
            or_conditions = [
                getattr(Credential, field_name).icontains(search_term, autoescape=True)
                for field_name in SEARCH_FIELDS
            ]
            query = query.filter(db.or_(*or_conditions))
        return query.order_by(*self._newest_first()).all()
