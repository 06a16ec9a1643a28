"""Research domain model — maps to the 'domaines' table."""

from sqlalchemy import Column, Integer, String, Text

from app.infrastructure.database import Base


class Domain(Base):
    __tablename__ = "domaines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Domain {self.name}>"
