"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class BadReferenceError(DomainError):
    """Raised when a comment references a parent it may not attach to.

    Covers parents that live under a different subject and parents whose
    own ancestor chain is broken (missing, deleted or cyclic).
    """

    def __init__(self, message: str):
        super().__init__(message)


class ParentNotFoundError(NotFoundError, BadReferenceError):
    """Raised when the requested parent comment is missing or deleted."""

    def __init__(self, parent_id: str):
        NotFoundError.__init__(self, "Parent comment", parent_id)


class NotAuthorizedError(DomainError):
    """Raised when a user attempts to change content they don't own."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        super().__init__(
            f"User {user_id} is not authorized to modify {resource} {resource_id}"
        )


class StorageUnavailableError(DomainError):
    """Raised when the backing store cannot be reached at all.

    Unlike row-level failures this aborts batch work; retrying later is safe.
    """

    pass
