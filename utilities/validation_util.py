import re

from domain.credential import ACCOUNT_TYPES, EXTERNAL_NAMES, OPTIONAL_FIELDS, STATUS_TYPES

REQUIRED_MESSAGES = {
    'platform': "Platform Name is required",
    'username': "Username is required",
    'password': "Password is required",
    'account_identity': "Account Identity is required",
}
PASSWORD_STRENGTH_MESSAGE = "Password strength: 0-5 (Weak to Strong)"
MAX_PASSWORD_STRENGTH = 5


class ValidationUtility:
    @staticmethod
    def is_valid_email(email: str) -> bool:
        """
        Basic shape check of an email address.
        """
        if not email:
            return False
        pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
        return re.match(pattern, email) is not None

    @staticmethod
    def password_strength(password: str) -> int:
        """
        Number of satisfied criteria out of: lowercase, uppercase, digit,
        special character, length of at least 8. Ranges 0..5.
        """
        if not password:
            return 0
        checks = (
            re.search(r"[a-z]", password) is not None,
            re.search(r"[A-Z]", password) is not None,
            re.search(r"\d", password) is not None,
            re.search(r"[^A-Za-z0-9]", password) is not None,
            len(password) >= 8,
        )
        return sum(checks)

    @staticmethod
    def account_password_errors(password: str, min_length: int = 8) -> list[str]:
        """
        Rules for the vault owner's own login password.
        """
        if not isinstance(password, str):
            return ["Password is required"]
        errors = []
        if len(password) < min_length:
            errors.append(f"Password must be at least {min_length} characters")
        if not re.search(r"[A-Z]", password):
            errors.append("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", password):
            errors.append("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", password):
            errors.append("Password must contain at least one number")
        if not re.search(r"[^A-Za-z0-9]", password):
            errors.append("Password must contain at least one special character")
        return errors

    @staticmethod
    def validate_credential(data: dict, partial: bool = False) -> dict[str, list[str]]:
        """
        Checks credential fields (model names) against the credential schema.
        With partial=True only the keys present in `data` are checked.
        Returns messages keyed by the external (camelCase) field name; empty when valid.
        """
        errors: dict[str, list[str]] = {}

        def add(field: str, message: str) -> None:
            errors.setdefault(EXTERNAL_NAMES[field], []).append(message)

        for field, message in REQUIRED_MESSAGES.items():
            if partial and field not in data:
                continue
            value = data.get(field)
            if not isinstance(value, str) or value == "":
                add(field, message)

        password = data.get('password')
        if isinstance(password, str) and password and ValidationUtility.password_strength(password) == 0:
            add('password', PASSWORD_STRENGTH_MESSAGE)

        if not partial or 'account_type' in data:
            if data.get('account_type') not in ACCOUNT_TYPES:
                add('account_type', "Invalid account type")
        if not partial or 'status' in data:
            if data.get('status') not in STATUS_TYPES:
                add('status', "Invalid status")

        for field in OPTIONAL_FIELDS:
            value = data.get(field)
            if value is not None and not isinstance(value, str):
                add(field, "Expected a string or null")

        return errors

    @staticmethod
    def format_field_errors(field_errors: dict[str, list[str]]) -> str:
        return "; ".join(
            f"Field '{field}': {message}"
            for field, messages in field_errors.items()
            for message in messages
        )
