from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from medstore.db.base import Base


class Medicine(Base):
    """
    Stock-keeping item of one store.

    Deleting the owning store is refused while medicines exist, so the
    foreign key carries no cascade.
    """
    __tablename__ = "medicines"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_medicines_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    expiry_date = Column(Date, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    batch_number = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    store = relationship("Store", backref="medicines")

    def __repr__(self):
        return f"<Medicine {self.name} batch={self.batch_number} stock={self.stock}>"
