from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def section_registry():
    """Template registry injected into the running app by create_app()."""
    return current_app.extensions["section_registry"]
