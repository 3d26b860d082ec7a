"""Recipe payload models."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Recipe(BaseModel):
    """Recipe as stored by the recipe collaborator.

    Files written by the earlier .NET store use PascalCase keys, so both
    spellings are accepted on input; output always uses lower-case keys.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(validation_alias=AliasChoices("title", "Title"))
    servings: int = Field(
        default=0,
        alias="yield",
        validation_alias=AliasChoices("yield", "Yield", "servings"),
    )
    ingredients: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ingredients", "Ingredients"),
    )


class RecipeList(BaseModel):
    """Listing of stored recipes."""

    recipes: list[Recipe]
    total_count: int
