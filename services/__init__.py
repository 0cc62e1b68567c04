"""Services package - Business logic layer"""

from services.profile_service import ProfileService
from services.wallet_service import WalletService
from services.fridge_service import FridgeService
from services.recipe_service import RecipeService
from services.assistant_service import AssistantService
from services.cart_service import CartService
from services.recipe_wizard_service import RecipeWizardService
from services.course_service import CourseService, PlatformSettingService

# Note: matching contains pure functions, not a class

__all__ = [
    "ProfileService",
    "WalletService",
    "FridgeService",
    "RecipeService",
    "AssistantService",
    "CartService",
    "RecipeWizardService",
    "CourseService",
    "PlatformSettingService",
]
