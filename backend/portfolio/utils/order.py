from portfolio.extensions import db

def compact_order(query, model, order_field="order"):
    """
    Re-assigns sequential order values (1..N) for a scoped query.
    Ties keep their creation order.
    """
    column = getattr(model, order_field)
    items = query.order_by(column.asc(), model.created_at.asc()).all()

    for index, item in enumerate(items, start=1):
        setattr(item, order_field, index)

    db.session.flush()
    return items
