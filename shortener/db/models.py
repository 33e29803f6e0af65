from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# BIGSERIAL on PostgreSQL; SQLite only auto-increments INTEGER primary keys
BigId = BigInteger().with_variant(Integer, "sqlite")


class User(Base):
    __tablename__ = "users"

    id = Column(BigId, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False)
    hashed_pw = Column(Text, nullable=False)
    email = Column(Text, nullable=False)

    urls = relationship("Url", back_populates="creator")


class Url(Base):
    __tablename__ = "urls"

    id = Column(BigId, primary_key=True, autoincrement=True)
    shorturl = Column(Text, nullable=False)
    longurl = Column(Text, nullable=False)
    created_by = Column(
        BigInteger,
        ForeignKey("users.id", name="urls_created_by_foreign"),
        nullable=True,
    )
    # Only ever changed by an in-database increment
    clicks = Column(BigInteger, nullable=False, default=0)

    creator = relationship("User", back_populates="urls")

    __table_args__ = (
        UniqueConstraint("shorturl", name="urls_shorturl_unique"),
        Index("urls_shorturl_index", "shorturl"),
    )
