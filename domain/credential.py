from . import db
from datetime import datetime, timezone

ACCOUNT_TYPES = (
    "#1-TopPriority",
    "#2-Educational",
    "#3-Digital",
    "#4-Social",
    "#5-Financial",
    "#6-Entertainment",
)

STATUS_TYPES = ("Active", "Inactive", "Suspended", "Archived")

DEFAULT_ACCOUNT_TYPE = "#1-TopPriority"
DEFAULT_STATUS = "Active"

# Column order of CSV import/export and of the exact-duplicate comparison.
CONTENT_FIELDS = (
    'platform',
    'account_name',
    'url',
    'username',
    'password',
    'account_identity',
    'account_type',
    'status',
    'special_pin',
    'recovery_number',
    'recovery_email',
)

REQUIRED_FIELDS = ('platform', 'username', 'password', 'account_identity', 'account_type', 'status')
OPTIONAL_FIELDS = ('account_name', 'url', 'special_pin', 'recovery_number', 'recovery_email')

EXTERNAL_NAMES = {
    'platform': 'platform',
    'account_name': 'accountName',
    'url': 'url',
    'username': 'username',
    'password': 'password',
    'account_identity': 'accountIdentity',
    'account_type': 'accountType',
    'status': 'status',
    'special_pin': 'specialPin',
    'recovery_number': 'recoveryNumber',
    'recovery_email': 'recoveryEmail',
}
INTERNAL_NAMES = {external: internal for internal, external in EXTERNAL_NAMES.items()}

CSV_COLUMNS = [EXTERNAL_NAMES[field] for field in CONTENT_FIELDS]


def utcnow() -> datetime:
    """Naive UTC timestamp, the form the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_internal(payload: dict) -> dict:
    """
    Maps an API/CSV payload keyed by camelCase names onto model field names.
    Unknown keys are dropped; keys that are present keep their value, including None.
    """
    return {INTERNAL_NAMES[key]: value for key, value in payload.items() if key in INTERNAL_NAMES}


class Credential(db.Model):
    __tablename__ = 'credentials'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.user_id'), nullable=False, index=True)

    platform = db.Column(db.Text, nullable=False)
    account_name = db.Column(db.Text, nullable=True)
    url = db.Column(db.Text, nullable=True)
    username = db.Column(db.Text, nullable=False)
    password = db.Column(db.Text, nullable=False)
    account_identity = db.Column(db.Text, nullable=False)
    account_type = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(32), nullable=False, default=DEFAULT_STATUS)

    special_pin = db.Column(db.Text, nullable=True)
    recovery_number = db.Column(db.Text, nullable=True)
    recovery_email = db.Column(db.Text, nullable=True)

    last_changed = db.Column(db.DateTime, default=utcnow, nullable=False)

    def content(self) -> dict:
        return {field: getattr(self, field) for field in CONTENT_FIELDS}

    def to_dict(self) -> dict:
        data = {"id": self.id, "userId": self.user_id}
        for field in CONTENT_FIELDS:
            data[EXTERNAL_NAMES[field]] = getattr(self, field)
        data["lastChanged"] = self.last_changed.isoformat() if self.last_changed else None
        return data

    def __repr__(self):
        return f"Credential(ID: {self.id}, Platform: '{self.platform}', UserID: {self.user_id})"
