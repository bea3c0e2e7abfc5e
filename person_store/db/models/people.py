import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Text, Uuid
from .base import Base, now_utc

MIN_AGE = 18
# Upper bound of the 32-bit INTEGER column.
MAX_AGE = 2**31 - 1


class Person(Base):
    __tablename__ = 'people'
    # Column names follow the stored record fields; attributes stay snake_case.
    id = Column('_id', Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    last_name = Column('lastName', Text, nullable=True)
    address = Column(Text, nullable=False)
    gender = Column(Text, nullable=False)
    job = Column(Text, nullable=True)
    age = Column(Integer, nullable=True)
    created_at = Column('createdAt', DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column('updatedAt', DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)

    __table_args__ = (
        CheckConstraint(f'age IS NULL OR age >= {MIN_AGE}', name='ck_people_age_adult'),
    )

    def __repr__(self):
        return f"<Person id={self.id} name={self.name!r}>"
