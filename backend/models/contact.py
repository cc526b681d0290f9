# backend/models/contact.py
import enum
from sqlalchemy import Column, Integer, String, Enum
from database import Base

class ContactType(str, enum.Enum):
    VENDOR = "VENDOR"
    CUSTOMER = "CUSTOMER"

# Business partner referenced by receipts (vendor) and deliveries (customer)
class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    type = Column(Enum(ContactType), nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
