"""Recipe reimagining towards a dietary goal."""

from dataclasses import dataclass

from calorie_tracker.domain.ai import RecipeGoal, RecipeMakeover
from calorie_tracker.domain.errors import InvalidInputError
from calorie_tracker.services.structured import StructuredModel, object_schema

GOAL_DESCRIPTIONS: dict[str, str] = {
    "lower-calorie": "lower in calories",
    "higher-protein": "higher in protein",
    "lower-fat": "lower in fat",
    "lower-carb": "lower in carbohydrates",
    "vegan": "vegan (no animal products)",
    "vegetarian": "vegetarian (no meat)",
}

_NUMBER = {"type": "number", "minimum": 0}
_STRINGS = {"type": "array", "items": {"type": "string"}}
_NUTRITION = object_schema(
    {
        "calories": _NUMBER,
        "protein_g": _NUMBER,
        "carbs_g": _NUMBER,
        "fat_g": _NUMBER,
    }
)

RECIPE_SCHEMA = object_schema(
    {
        "original_nutrition": _NUTRITION,
        "reimagined_recipe": object_schema(
            {
                "title": {"type": "string"},
                "description": {"type": "string"},
                "ingredients": _STRINGS,
                "instructions": _STRINGS,
                "nutrition_analysis": {"type": "string"},
            }
        ),
        "reimagined_nutrition": _NUTRITION,
    }
)


@dataclass
class RecipeService:
    model: StructuredModel

    async def reimagine(
        self, ingredients: str, instructions: str, goal: RecipeGoal
    ) -> RecipeMakeover:
        """Rewrite a recipe for ``goal`` with nutrition before and after."""
        if goal not in GOAL_DESCRIPTIONS:
            raise InvalidInputError(f"Unknown recipe goal: {goal}")
        if not ingredients.strip() or not instructions.strip():
            raise InvalidInputError("Ingredients and instructions are required")
        return await self.model.request(
            RecipeMakeover,
            prompt=_recipe_prompt(ingredients, instructions, GOAL_DESCRIPTIONS[goal]),
            schema=RECIPE_SCHEMA,
            schema_name="recipe_makeover",
        )


def _recipe_prompt(ingredients: str, instructions: str, goal: str) -> str:
    return (
        "You are an expert recipe developer and nutritionist. Reimagine the "
        f"recipe below so that it is {goal}.\n\n"
        f"Ingredients:\n{ingredients.strip()}\n\n"
        f"Instructions:\n{instructions.strip()}\n\n"
        "1. Estimate calories, protein, carbs and fat for the whole original dish.\n"
        "2. Rewrite the ingredients and instructions so the dish meets the goal. "
        'Be specific about substitutions (e.g. "replace 1 cup of sour cream with '
        '1 cup of non-fat Greek yogurt"). Give it a catchy title, a short '
        "description and a short analysis of the key changes.\n"
        "3. Estimate the same nutrition values for the new dish."
    )
