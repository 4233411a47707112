"""Workspace error types.

They extend the built-in families the API layer already maps:
KeyError -> 404, ValueError -> 400. Conflicts get their own 409.
"""


class ResourceNotFoundError(KeyError):
    """A referenced workspace, grant, or task does not exist."""

    def __str__(self) -> str:
        # KeyError.__str__ repr()s its argument.
        return str(self.args[0]) if self.args else ""


class AccessConflictError(ValueError):
    """An active grant already exists for the (workspace, user) pair."""


class AccessListValidationError(ValueError):
    """A user id appears in more than one access list of a create request."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors
