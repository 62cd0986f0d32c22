from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from config import logger
from database import ACCOUNTS
from errors import AccountNotFound, DuplicateAccount, InvalidCredential
from schemas import Account, Role
from security import hash_password, verify_password


def public_account(doc: dict) -> dict:
    return {
        "name": doc.get("name"),
        "email": doc.get("email"),
        "phone": doc.get("phone"),
        "address": doc.get("address"),
        "role": doc.get("role"),
    }


class AccountStore:
    """Account records. Accounts are created at signup and never modified."""

    def __init__(self, db: Database):
        self.accounts = db[ACCOUNTS]

    def signup(self, name: str, email: str, phone: str, address: str, password: str, role: Role) -> None:
        if self.accounts.find_one({"email": email}):
            raise DuplicateAccount()
        account = Account(
            name=name,
            email=email,
            phone=phone,
            address=address,
            password=hash_password(password),
            role=role,
        )
        try:
            self.accounts.insert_one(account.model_dump(mode="json"))
        except DuplicateKeyError:
            # Lost a race against a concurrent signup with the same email.
            raise DuplicateAccount()
        logger.info("Signed up %s as %s", email, account.role.value)

    def login(self, email: str, password: str) -> dict:
        """Check the credentials; return the public account fields."""
        doc = self.accounts.find_one({"email": email})
        if not doc:
            raise AccountNotFound()
        if not verify_password(password, doc.get("password", "")):
            logger.warning("Failed login for %s", email)
            raise InvalidCredential()
        logger.info("Logged in %s", email)
        return public_account(doc)
