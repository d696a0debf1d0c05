"""User persistence."""

from identity.account.account import User
from identity.domain import identity
from shared.database import USERS, get_database
from shared.model import from_document, to_document


@identity.repository(part_of=User)
class UserRepository:
    @property
    def collection(self):
        return get_database()[USERS]

    def add(self, user: User) -> User:
        self.collection.insert_one(to_document(user))
        return user

    def save(self, user: User) -> User:
        self.collection.replace_one({"_id": user.id}, to_document(user), upsert=True)
        return user

    def find(self, user_id: str) -> User | None:
        document = self.collection.find_one({"_id": str(user_id)})
        return from_document(User, document) if document else None

    def find_by_email(self, email: str) -> User | None:
        document = self.collection.find_one({"email": email.strip().lower()})
        return from_document(User, document) if document else None
