from app.db.base_class import Base
from sqlalchemy import Column, Integer, String, Float


class Employee(Base):
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    salary = Column(Float, nullable=False)
    department = Column(String(100), nullable=False, index=True)
    gender = Column(String(50), nullable=False, index=True)

    # Derived from salary, recomputed on every write and read
    bonus = Column(Float, nullable=True)
    provident_fund = Column(Float, nullable=True)
    tax = Column(Float, nullable=True)

    def __repr__(self) -> str:
        return f"<Employee id={self.id} email={self.email!r} department={self.department!r}>"
