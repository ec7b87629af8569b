def reject_null(value):
    """After-validator for PATCH fields backed by NOT NULL columns.

    Omitting such a field leaves it unchanged; sending an explicit null is
    refused instead of reaching the database.
    """
    if value is None:
        raise ValueError("may be omitted but not null")
    return value
