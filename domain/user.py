from . import db
from .credential import utcnow

class User(db.Model):
    __tablename__ = 'user'
    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    password_hash = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    credentials = db.relationship(
        'Credential',
        backref='owner',
        lazy=True,
        cascade="all, delete-orphan"
    )

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"User('{self.username}')"
