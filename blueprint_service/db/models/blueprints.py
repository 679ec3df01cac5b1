from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from .base import Base


class Blueprint(Base):
    __tablename__ = 'blueprints'
    author = Column(String(120), primary_key=True)
    name = Column(String(120), primary_key=True)

    points = relationship(
        "BlueprintPoint",
        back_populates="blueprint",
        cascade="all, delete-orphan",
        order_by="BlueprintPoint.position_index",
    )


class BlueprintPoint(Base):
    __tablename__ = 'blueprint_points'
    # SQLite only auto-increments INTEGER PRIMARY KEY columns
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    author = Column(String(120), nullable=False)
    blueprint_name = Column(String(120), nullable=False)
    x = Column(Integer, nullable=False)
    y = Column(Integer, nullable=False)
    position_index = Column(Integer, nullable=False)

    blueprint = relationship("Blueprint", back_populates="points")

    __table_args__ = (
        ForeignKeyConstraint(
            ['author', 'blueprint_name'],
            ['blueprints.author', 'blueprints.name'],
            ondelete='CASCADE',
            name='fk_blueprint',
        ),
        UniqueConstraint('author', 'blueprint_name', 'position_index', name='uq_blueprint_points_position'),
        CheckConstraint('position_index >= 0', name='ck_blueprint_points_position_non_negative'),
        Index('idx_blueprint_points_owner', 'author', 'blueprint_name'),
    )
