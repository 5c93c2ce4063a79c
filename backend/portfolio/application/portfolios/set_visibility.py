from portfolio.models.user import User
from portfolio.domain.invariants.exceptions import InvariantViolation
from portfolio.utils.audit import log_action
from portfolio.utils.transaction import transactional


def set_portfolio_visibility(*, user: User, is_public) -> User:
    """
    Publish or hide a user's whole portfolio.

    Section-level `is_public` still applies inside a public portfolio;
    a private portfolio hides every section regardless.
    """
    if not isinstance(is_public, bool):
        raise InvariantViolation("Portfolio is_public must be a boolean.")

    if user.is_public == is_public:
        return user

    with transactional():
        user.is_public = is_public

        log_action(
            action="portfolio.publish" if is_public else "portfolio.unpublish",
            entity_type="user",
            entity_id=user.id,
            actor_id=user.id,
            payload={"is_public": is_public},
        )

    return user
