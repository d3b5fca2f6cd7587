# backend/beautibook/repositories/customer_repository.py
"""Customer lookups."""

from typing import Optional

from sqlalchemy.orm import Session

from ..models.customer import Customer
from .base_repository import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Repository for guest customers, keyed in practice by phone number."""

    def __init__(self, db: Session):
        super().__init__(db, Customer)

    def get_by_phone(self, phone: str) -> Optional[Customer]:
        return self.find_one_by(phone=phone)
