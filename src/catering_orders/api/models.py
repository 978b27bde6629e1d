"""Pydantic models for API request bodies."""

from pydantic import BaseModel, ConfigDict, Field


class FiniteModel(BaseModel):
    """Request body whose float fields reject inf and NaN."""

    model_config = ConfigDict(allow_inf_nan=False)


class LoginRequest(BaseModel):
    """Credentials forwarded to the catering API."""

    email: str
    password: str


class CategoryCreate(BaseModel):
    name: str


class IngredientCreate(BaseModel):
    name: str
    category_id: int | None = None


class CustomerCreate(BaseModel):
    name: str
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class DishIngredientInput(FiniteModel):
    """Amount of one ingredient per dish base quantity."""

    ingredient_id: int
    amount_per_base: float
    unit: str
    ingredient_name: str = ""


class DishCreate(FiniteModel):
    name: str
    base_quantity: float
    base_unit: str
    price_per_base: float | None = None
    cost_per_base: float | None = None
    ingredients: list[DishIngredientInput] = Field(default_factory=list)


class OrderPreviewRequest(FiniteModel):
    """Dish and quantity to scale; overrides map ingredient id to amount."""

    dish_id: int
    requested_quantity: float
    overrides: dict[int, str | float] = Field(default_factory=dict)


class DeliveryDetails(FiniteModel):
    """Optional booking and delivery fields shared by order bodies."""

    booking_date: str | None = None
    booking_time: str | None = None
    delivery_date: str | None = None
    delivery_time: str | None = None
    delivery_address: str | None = None


class OrderCreate(DeliveryDetails):
    """A single-dish order."""

    dish_id: int | None = None
    customer_id: int | None = None
    requested_quantity: float = 0
    overrides: dict[int, str | float] = Field(default_factory=dict)


class CheckoutLine(FiniteModel):
    dish_id: int | None = None
    requested_quantity: float = 0
    overrides: dict[int, str | float] = Field(default_factory=dict)


class CheckoutCreate(DeliveryDetails):
    """Several dishes for one customer placed as one checkout."""

    customer_id: int | None = None
    lines: list[CheckoutLine] = Field(default_factory=list)
