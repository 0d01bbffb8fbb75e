"""Error taxonomy for the recipe import workflow."""


class RecipeImportError(Exception):
    """Base class for import workflow failures."""


class ValidationError(RecipeImportError):
    """Caller input was rejected before any remote call."""


class AuthenticationError(RecipeImportError):
    """Credentials or session were rejected by the list service."""


class RemoteServiceError(RecipeImportError):
    """Transport, protocol, or unexpected-shape failure from the list service."""


class NotFoundError(RecipeImportError):
    """A referenced collection or recipe identifier does not resolve."""

    def __init__(self, identifier: str, kind: str = "collection") -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.identifier = identifier
        self.kind = kind
