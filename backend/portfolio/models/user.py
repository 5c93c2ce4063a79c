from werkzeug.security import generate_password_hash, check_password_hash
from portfolio.extensions import db
from .base import BaseModel

class User(BaseModel):
    __tablename__ = 'users'

    email = db.Column(db.String(120), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=True)
    # Public portfolio address: /portfolios/<slug>
    slug = db.Column(db.String(200), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    is_active = db.Column(db.Boolean, default=True)
    # Private portfolios are hidden from /portfolios/<slug> entirely
    is_public = db.Column(db.Boolean, nullable=False, default=False)

    sections = db.relationship(
        "CustomSection",
        back_populates="user",
        order_by="CustomSection.order",
        cascade="all, delete-orphan"
    )

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)
