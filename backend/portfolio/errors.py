from flask import current_app, jsonify
from sqlalchemy.orm.exc import StaleDataError
from portfolio.domain.invariants.exceptions import (
    ContentValidationError,
    EntryNotFound,
    InvariantViolation,
    MissingEntries,
    SectionError,
    SectionNotFound,
    StaleSection,
    UnknownSectionType,
)

def _error(name, message, status, **extra):
    response = jsonify({"error": name, "message": message, **extra})
    response.status_code = status
    return response

def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        return _error("InvariantViolation", str(error), 400)

    @app.errorhandler(ContentValidationError)
    def handle_content_validation(error):
        return _error("ValidationError", str(error), 422, errors=error.errors)

    @app.errorhandler(UnknownSectionType)
    def handle_unknown_type(error):
        return _error("UnknownSectionType", str(error), 400)

    @app.errorhandler(SectionNotFound)
    @app.errorhandler(EntryNotFound)
    def handle_not_found(error):
        return _error(type(error).__name__, str(error), 404)

    @app.errorhandler(MissingEntries)
    @app.errorhandler(StaleSection)
    def handle_conflict(error):
        current_app.logger.warning("Conflict: %s", error)
        return _error(type(error).__name__, str(error), 409)

    @app.errorhandler(StaleDataError)
    def handle_stale_write(error):
        current_app.logger.warning("Concurrent section write rejected: %s", error)
        return _error("StaleSection", "Conflict detected. Section has been modified.", 409)

    @app.errorhandler(SectionError)
    @app.errorhandler(ValueError)
    def handle_value_error(error):
        return _error("BadRequest", str(error), 400)
