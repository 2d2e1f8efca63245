"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold rules that span a comment tree or several stores
    rather than a single row.
    """

    pass
