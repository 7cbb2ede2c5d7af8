from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from app.database import Base


class Store(Base):
    """A retail location. Reference data, the unit of scoping for managers."""
    __tablename__ = "stores"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=True)

    users = relationship("User", back_populates="store")

    def __repr__(self):
        return f"<Store {self.id} {self.name}>"
