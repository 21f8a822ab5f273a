from werkzeug.security import generate_password_hash, check_password_hash

class HashingUtility:
    DEFAULT_METHOD = "pbkdf2:sha256"

    def __init__(self, method: str = DEFAULT_METHOD):
        self.method = method

    def hash_password(self, password: str) -> str:
        """
        Hash of an account (login) password.
        Stored credential secrets are never hashed: the vault has to hand them back.
        """
        return generate_password_hash(password, method=self.method)

    @staticmethod
    def verify_password(hashed_password: str, password_to_check: str) -> bool:
        return check_password_hash(hashed_password, password_to_check)
