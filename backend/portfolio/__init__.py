import logging
from flask import Flask, send_file, current_app
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .errors import register_error_handlers
from .domain.sections.registry import DEFAULT_REGISTRY
from flask_swagger_ui import get_swaggerui_blueprint
import os


def create_app(config_name: str = "development", registry=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # -------------------------------------------------
    # Logging
    # -------------------------------------------------
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # Models must be imported before create_all / migrations
    from .models import user, custom_section, audit_log  # noqa: F401

    # -------------------------------------------------
    # Section templates
    # -------------------------------------------------
    app.extensions["section_registry"] = registry if registry is not None else DEFAULT_REGISTRY

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC)
    # -------------------------------------------------
    @app.route("/openapi/sections.yaml", methods=["GET"], endpoint="openapi_sections")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "sections_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("sections_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/sections.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Portfolio Sections API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    app.logger.info(
        "Portfolio app ready (%s) with section types: %s",
        config_name,
        ", ".join(app.extensions["section_registry"].list_types()),
    )
    return app
