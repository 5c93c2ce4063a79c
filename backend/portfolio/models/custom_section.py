from portfolio.extensions import db
from .base import BaseModel

class CustomSection(BaseModel):
    __tablename__ = "custom_sections"

    user_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(100), nullable=False)  # star-memo, certifications, custom, ...
    description = db.Column(db.Text, nullable=True)
    layout = db.Column(db.String(20), nullable=False, default="list")  # grid | list | timeline | cards
    is_public = db.Column(db.Boolean, nullable=False, default=True, index=True)
    order = db.Column(db.Integer, nullable=False, default=0)

    # Template snapshot plus entries, see portfolio.domain.sections
    content = db.Column(db.JSON, nullable=False, default=dict)

    # Revision marker; every UPDATE is conditional on it
    version = db.Column(db.Integer, nullable=False)

    user = db.relationship("User", back_populates="sections")

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        db.UniqueConstraint("user_id", "slug", name="uq_section_slug_per_user"),
        db.Index("idx_section_user_order", "user_id", "order"),
    )

    @property
    def entries(self):
        return (self.content or {}).get("entries") or []
