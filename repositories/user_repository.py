from domain.user import User
from domain import db

class UserRepository:
    def get_by_id(self, user_id: int) -> User | None:
        return db.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return User.query.filter_by(username=username.strip().lower()).first()

    def add_user(self, username: str, password_hash: str) -> User:
        new_user = User(
            username=username.strip().lower(),
            password_hash=password_hash,
        )
        db.session.add(new_user)
        db.session.commit()
        return new_user
