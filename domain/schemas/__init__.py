"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.profile_schemas import (
    UserCreate,
    UserResponse,
    ProfileUpdateRequest,
    UserSettingsResponse,
    UserSettingsPatch,
    RoleUpdateRequest,
)
from domain.schemas.fridge_schemas import (
    FridgeItemCreate,
    FridgeItemQuantityUpdate,
    FridgeItemResponse,
    FridgeItemDeleted,
    FridgePriceCreate,
    FridgePriceResponse,
    FridgeStatsResponse,
    FridgeListResponse,
)
from domain.schemas.recipe_schemas import (
    IngredientCreate,
    IngredientUpdate,
    IngredientResponse,
    RecipeIngredientIn,
    RecipeIngredientOut,
    RecipeStepIn,
    RecipeStepOut,
    RecipeCreate,
    RecipeUpdate,
    RecipeSummary,
    RecipeDetail,
    RecipePurchaseResponse,
)
from domain.schemas.matching_schemas import (
    FridgeStock,
    MatchedIngredient,
    MissingIngredient,
    MatchEconomy,
    RecipeMatch,
    RecipeMatchListResponse,
    AvailableRecipesResponse,
    Selection,
    AssistantNextRequest,
    AssistantNextResponse,
    CookRecipeRequest,
    CookRecipeResponse,
    IngredientUsage,
)
from domain.schemas.commerce_schemas import (
    CartItemAdd,
    CartItemUpdate,
    CartLine,
    CartSummary,
    CheckoutRequest,
    CheckoutResponse,
    OrderItemResponse,
    OrderResponse,
    WalletSummary,
    TransactionResponse,
    TokenPurchaseRequest,
    TokenTransferRequest,
    TokenGrantRequest,
)
from domain.schemas.wizard_schemas import (
    AIRecipeIngredientIn,
    AIRecipeInput,
    AIRecipePreview,
    PreviewIngredient,
    PreviewStep,
    Nutrition,
    SaveRecipeRequest,
    NameSuggestion,
)
from domain.schemas.course_schemas import (
    CourseStepIn,
    CourseStepOut,
    CourseCreate,
    CourseUpdate,
    CourseResponse,
    PublishRequest,
    PlatformSettingUpsert,
    PlatformSettingResponse,
)

__all__ = [
    # Profile schemas
    "UserCreate",
    "UserResponse",
    "ProfileUpdateRequest",
    "UserSettingsResponse",
    "UserSettingsPatch",
    "RoleUpdateRequest",
    # Fridge schemas
    "FridgeItemCreate",
    "FridgeItemQuantityUpdate",
    "FridgeItemResponse",
    "FridgeItemDeleted",
    "FridgePriceCreate",
    "FridgePriceResponse",
    "FridgeStatsResponse",
    "FridgeListResponse",
    # Catalog schemas
    "IngredientCreate",
    "IngredientUpdate",
    "IngredientResponse",
    "RecipeIngredientIn",
    "RecipeIngredientOut",
    "RecipeStepIn",
    "RecipeStepOut",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeSummary",
    "RecipeDetail",
    "RecipePurchaseResponse",
    # Matching / assistant schemas
    "FridgeStock",
    "MatchedIngredient",
    "MissingIngredient",
    "MatchEconomy",
    "RecipeMatch",
    "RecipeMatchListResponse",
    "AvailableRecipesResponse",
    "Selection",
    "AssistantNextRequest",
    "AssistantNextResponse",
    "CookRecipeRequest",
    "CookRecipeResponse",
    "IngredientUsage",
    # Commerce schemas
    "CartItemAdd",
    "CartItemUpdate",
    "CartLine",
    "CartSummary",
    "CheckoutRequest",
    "CheckoutResponse",
    "OrderItemResponse",
    "OrderResponse",
    "WalletSummary",
    "TransactionResponse",
    "TokenPurchaseRequest",
    "TokenTransferRequest",
    "TokenGrantRequest",
    # Wizard schemas
    "AIRecipeIngredientIn",
    "AIRecipeInput",
    "AIRecipePreview",
    "PreviewIngredient",
    "PreviewStep",
    "Nutrition",
    "SaveRecipeRequest",
    "NameSuggestion",
    # Course / settings schemas
    "CourseStepIn",
    "CourseStepOut",
    "CourseCreate",
    "CourseUpdate",
    "CourseResponse",
    "PublishRequest",
    "PlatformSettingUpsert",
    "PlatformSettingResponse",
]
