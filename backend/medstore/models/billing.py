from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from medstore.db.base import Base


class Billing(Base):
    """
    Prescription / dispensation record.

    store_id always equals medicine.store_id. Each billing took one unit of
    the medicine's stock when it was created.
    """
    __tablename__ = "billings"

    id = Column(Integer, primary_key=True, index=True)
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=False, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    frequency = Column(String(16), nullable=False)  # morning | evening
    name = Column(String(255), nullable=False, index=True)  # patient name
    number = Column(String(64), nullable=False)  # contact or prescription number
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    medicine = relationship("Medicine", backref="billings")
    store = relationship("Store", backref="billings")

    def __repr__(self):
        return f"<Billing {self.id} patient={self.name}>"
