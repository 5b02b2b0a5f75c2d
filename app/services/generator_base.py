from typing import Protocol

from app.schemas.recipe import Recipe


class RecipeGenerator(Protocol):
    def generate(self, user_input: str) -> Recipe: ...
