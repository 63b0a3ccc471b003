"""Dependency model"""

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint

from .base import Base, DependencyType, utcnow, value_enum

class Dependency(Base):
    """Directed edge: ``issue_id`` depends on ``depends_on_id``.

    For ``parent-child`` edges the source (``issue_id``) is the child and the
    target (``depends_on_id``) is the containing epic.
    """
    
    __tablename__ = "dependencies"
    
    # Composite primary key
    issue_id = Column(String(50), ForeignKey("issues.id"), primary_key=True)
    depends_on_id = Column(String(50), ForeignKey("issues.id"), primary_key=True)
    
    # Dependency type
    type = Column(value_enum(DependencyType), nullable=False, default=DependencyType.BLOCKS)
    
    # Metadata
    created_by = Column(String(100), nullable=False, default="local")
    created_at = Column(DateTime, nullable=False, default=utcnow)
    
    # Ensure no duplicate dependencies
    __table_args__ = (
        UniqueConstraint('issue_id', 'depends_on_id', name='unique_dependency'),
    )
    
    def __repr__(self):
        return f"<Dependency(issue='{self.issue_id}', depends_on='{self.depends_on_id}', type='{self.type.value}')>"
    
