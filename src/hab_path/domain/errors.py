class InvalidQueryError(ValueError):
    """A path query whose points cannot be placed in the habitat."""
