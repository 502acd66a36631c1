"""Exceptions raised by the recipe store and surfaced unchanged by the service layer."""


class RecipeNotFoundError(LookupError):
    """Raised when a recipe identifier does not resolve to a stored recipe."""

    def __init__(self, recipe_id: int) -> None:
        self.recipe_id = recipe_id
        super().__init__(f"Recipe with id {recipe_id} not found")


class StoreUnavailableError(ConnectionError):
    """Raised when the database cannot be reached or a query fails at the driver level."""
