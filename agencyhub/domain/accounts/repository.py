"""Account repository - Database operations for users and the registration whitelist"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import User, WhitelistedEmail


class AccountRepository:
    """Repository for user and whitelist database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        """Exact, case-sensitive lookup"""
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        for key, value in updates.items():
            setattr(user, key, value)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_whitelisted(db: Session, email: str) -> Optional[WhitelistedEmail]:
        return db.query(WhitelistedEmail).filter(WhitelistedEmail.email == email).first()

    @staticmethod
    def upsert_whitelisted(
        db: Session, email: str, user_type: str, registration_code: str
    ) -> WhitelistedEmail:
        """Add an email to the whitelist, replacing the code of an existing entry"""
        entry = db.query(WhitelistedEmail).filter(WhitelistedEmail.email == email).first()
        if entry:
            entry.user_type = user_type
            entry.registration_code = registration_code
        else:
            entry = WhitelistedEmail(
                email=email, user_type=user_type, registration_code=registration_code
            )
            db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry
