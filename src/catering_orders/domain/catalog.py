"""Domain models for reference data: categories, ingredients, dishes, customers."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Category:
    """Groups ingredients for display and printing."""

    id: int
    name: str


@dataclass(frozen=True)
class Ingredient:
    """A stock ingredient belonging to exactly one category."""

    id: int
    name: str
    unit: str | None
    category_id: int | None
    category_name: str | None = None


@dataclass(frozen=True)
class DishIngredient:
    """Amount of an ingredient needed to produce a dish's base quantity."""

    ingredient_id: int
    ingredient_name: str
    amount_per_base: float
    unit: str


@dataclass(frozen=True)
class Dish:
    """A recipe with a base batch size and per-ingredient amounts."""

    id: int
    name: str
    base_quantity: float
    base_unit: str
    ingredients: list[DishIngredient] = field(default_factory=list)
    price_per_base: float | None = None
    cost_per_base: float | None = None

    @property
    def is_orderable(self) -> bool:
        """Dishes need at least one ingredient before they can be ordered."""
        return bool(self.ingredients)


@dataclass(frozen=True)
class Customer:
    """A customer placing orders."""

    id: int
    name: str
    phone: str | None = None
    email: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class ReferenceData:
    """Snapshot of all reference collections loaded from the API."""

    categories: list[Category]
    ingredients: list[Ingredient]
    dishes: list[Dish]
    customers: list[Customer]

    def ingredients_in_category(self, category: Category) -> list[Ingredient]:
        """Return ingredients attached to a category by id or by name."""
        return [
            ingredient
            for ingredient in self.ingredients
            if ingredient.category_id == category.id
            or ingredient.category_name == category.name
        ]
