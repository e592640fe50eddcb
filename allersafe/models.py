from typing import List, Optional
from pydantic import BaseModel, Field, constr


# --- Analysis ---

class AnalyzeFoodRequest(BaseModel):
    ingredients: Optional[List[str]] = Field(
        default=None, description="Ingredient strings; each entry is split on , ; . and newlines"
    )
    food_name: Optional[str] = Field(default=None, description="Display name of the food")
    user_id: Optional[str] = Field(default=None, description="Profile id used to load allergies")
    allergies: Optional[List[str]] = Field(
        default=None, description="Explicit allergy list; overrides the stored profile"
    )
    barcode: Optional[str] = None


class AllergenDetection(BaseModel):
    allergen: str
    confidence: float = Field(ge=0.0, le=1.0)
    source: str
    severity: str
    user_allergy: bool = False
    keyword: str


class AnalysisResult(BaseModel):
    food_name: str
    barcode: Optional[str] = None
    allergens_detected: List[AllergenDetection] = Field(default_factory=list)
    ingredients_analyzed: List[str] = Field(default_factory=list)
    safety_score: int = Field(ge=0, le=100)
    recommendations: List[str] = Field(default_factory=list)
    alternatives: List[str] = Field(default_factory=list)
    user_allergies_detected: bool = False
    ai_enhanced: bool = False
    ai_insights: Optional[str] = None
    analysis_method: str
    analyzed_at: str


class AnalyzeFoodResponse(BaseModel):
    success: bool = True
    analysis: AnalysisResult


# --- Dietary plan ---

class DietaryPlanRequest(BaseModel):
    user_id: Optional[str] = None
    allergies: Optional[List[str]] = None


class PlannedMeal(BaseModel):
    name: str
    items: List[str]


class PlanDay(BaseModel):
    day: str
    meals: List[PlannedMeal]


class GuidanceCard(BaseModel):
    id: str
    category: str
    title: str
    description: str
    foods: List[str] = Field(default_factory=list)
    avoid: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    allergen_specific: bool = False
    ai_generated: bool = False


class DietaryPlan(BaseModel):
    restrictions: List[str] = Field(default_factory=list)
    alternatives: List[str] = Field(default_factory=list)
    supplementation: List[str] = Field(default_factory=list)
    meal_plan: List[PlanDay] = Field(default_factory=list)
    shopping_list: List[str] = Field(default_factory=list)
    guidance: List[GuidanceCard] = Field(default_factory=list)
    unrecognized_allergies: List[str] = Field(default_factory=list)
    ai_enhanced: bool = False


class DietaryPlanResponse(BaseModel):
    success: bool = True
    plan: DietaryPlan


class FoodSafetyRequest(BaseModel):
    food_item: constr(strip_whitespace=True, min_length=1)
    user_id: Optional[str] = None
    allergies: Optional[List[str]] = None


class FoodSafetyResponse(BaseModel):
    food_item: str
    safe: bool
    allergies: List[str]


class SafeAlternativesRequest(BaseModel):
    allergen: constr(strip_whitespace=True, min_length=1)


class SafeAlternativesResponse(BaseModel):
    allergen: str
    recognized: bool
    alternatives: List[str]


class SafeRecipe(BaseModel):
    id: str
    name: str
    category: str
    description: str
    ingredients: List[str]
    cook_time: str
    difficulty: str = "Easy"
    servings: int = 2


class SafeRecipesResponse(BaseModel):
    success: bool = True
    recipes: List[SafeRecipe]


# --- Products ---

class BarcodeLookupRequest(BaseModel):
    barcode: constr(strip_whitespace=True, min_length=1)


class Product(BaseModel):
    name: str
    brand: str = ""
    ingredients: str = ""
    ingredients_list: List[str] = Field(default_factory=list)
    allergens: str = ""
    nutrition_grade: str = ""
    image_url: str = ""
    categories: str = ""
    source: str


class BarcodeLookupResponse(BaseModel):
    success: bool = True
    barcode: str
    product: Product
    lookup_timestamp: str


# --- Profiles & chat ---

class PatientProfile(BaseModel):
    id: str
    name: str = ""
    birthdate: Optional[str] = None
    symptoms: str = ""


class ChatRequest(BaseModel):
    message: Optional[str] = None
    user_id: Optional[str] = None


class ChatResponse(BaseModel):
    success: bool = True
    response: str
    ai_powered: bool = False
    timestamp: str
