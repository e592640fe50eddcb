from datetime import datetime, timezone
from typing import List, Optional
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from allersafe.core.allergens import get_knowledge_base
from allersafe.core.errors import InvalidInput
from allersafe.core.logging_config import get_logger
from allersafe.models import (
    AnalyzeFoodRequest,
    AnalyzeFoodResponse,
    BarcodeLookupRequest,
    BarcodeLookupResponse,
    ChatRequest,
    ChatResponse,
    DietaryPlanRequest,
    DietaryPlanResponse,
    FoodSafetyRequest,
    FoodSafetyResponse,
    SafeAlternativesRequest,
    SafeAlternativesResponse,
    SafeRecipesResponse,
)
from allersafe.services.chat_service import chat_assistant
from allersafe.services.dietary_planner import dietary_planner
from allersafe.services.food_analyzer import food_analyzer
from allersafe.services.product_service import ProductNotFoundError, product_service
from allersafe.services.profile_service import profile_store

app = FastAPI(title="AllerSafe Allergen Analysis API", version="0.1.0")
logger = get_logger(__name__)
RATE_LIMIT = 60
RATE_LIMIT_WINDOW_SECONDS = 60
rate_limit_state = {}


@app.middleware("http")
async def rate_limit_requests(request: Request, call_next):
    now = time.time()
    client_ip = request.client.host if request.client else "unknown"
    state = rate_limit_state.get(client_ip)

    if not state or now - state["window_start"] > RATE_LIMIT_WINDOW_SECONDS:
        state = {"window_start": now, "count": 0}

    if state["count"] >= RATE_LIMIT:
        return JSONResponse(
            status_code=429,
            content={
                "error_code": "RATE_LIMIT_EXCEEDED",
                "message": "Too many requests. Please retry later."
            }
        )

    state["count"] += 1
    rate_limit_state[client_ip] = state
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = str(uuid.uuid4())
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000.0
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} "
        f"{duration_ms:.1f}ms request_id={request_id}"
    )
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    logger.warning(f"Rejected request to {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=400,
        content={"error_code": exc.error_code, "message": exc.message}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request body for {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={
            "error_code": "INVALID_INPUT",
            "message": "Request body is malformed or missing required fields.",
            "errors": [
                {"loc": list(error.get("loc", [])), "msg": error.get("msg", "")}
                for error in exc.errors()
            ]
        }
    )


@app.exception_handler(ProductNotFoundError)
async def product_not_found_handler(request: Request, exc: ProductNotFoundError):
    logger.info(f"Barcode {exc.barcode} not found: {exc.errors}")
    return JSONResponse(
        status_code=404,
        content={
            "error_code": "PRODUCT_NOT_FOUND",
            "message": "Product not found in database",
            "suggestions": exc.suggestions,
            "sources": exc.sources,
            "errors": exc.errors
        }
    )


def _resolve_allergies(allergies: Optional[List[str]], user_id: Optional[str]) -> List[str]:
    """An explicit allergy list wins; otherwise fall back to the stored profile."""
    if allergies is not None:
        return allergies
    return profile_store.get_allergies(user_id)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.get("/")
def read_root():
    return {"message": "Welcome to the AllerSafe API. Visit /docs for documentation."}


@app.get("/health")
def health():
    return {"status": "ok", "allergens": len(get_knowledge_base())}


@app.post("/api/analyze-food", response_model=AnalyzeFoodResponse)
def analyze_food(request: AnalyzeFoodRequest):
    """
    Detect allergens in an ingredient list and score it against the user's allergies.
    """
    analysis = food_analyzer.analyze(
        request.ingredients,
        food_name=request.food_name,
        allergies=_resolve_allergies(request.allergies, request.user_id),
        barcode=request.barcode
    )
    return AnalyzeFoodResponse(analysis=analysis)


@app.post("/api/dietary-plan", response_model=DietaryPlanResponse)
def generate_dietary_plan(request: DietaryPlanRequest):
    """
    Build an allergy-aware dietary plan for the user.
    """
    plan = dietary_planner.generate_plan(_resolve_allergies(request.allergies, request.user_id))
    return DietaryPlanResponse(plan=plan)


@app.post("/api/food-safety", response_model=FoodSafetyResponse)
def check_food_safety(request: FoodSafetyRequest):
    allergies = _resolve_allergies(request.allergies, request.user_id)
    return FoodSafetyResponse(
        food_item=request.food_item,
        safe=dietary_planner.is_food_safe(request.food_item, allergies),
        allergies=allergies
    )


@app.post("/api/safe-alternatives", response_model=SafeAlternativesResponse)
def get_safe_alternatives(request: SafeAlternativesRequest):
    alternatives = dietary_planner.safe_alternatives(request.allergen)
    return SafeAlternativesResponse(
        allergen=request.allergen,
        recognized=bool(alternatives),
        alternatives=alternatives
    )


@app.post("/api/safe-recipes", response_model=SafeRecipesResponse)
def get_safe_recipes(request: DietaryPlanRequest):
    """
    Simple recipes built from the safe alternatives of each of the user's allergies.
    """
    recipes = dietary_planner.safe_recipes(_resolve_allergies(request.allergies, request.user_id))
    return SafeRecipesResponse(recipes=recipes)


@app.post("/api/barcode-lookup", response_model=BarcodeLookupResponse)
def lookup_barcode(request: BarcodeLookupRequest):
    product = product_service.lookup(request.barcode)
    return BarcodeLookupResponse(
        barcode=request.barcode,
        product=product,
        lookup_timestamp=_now()
    )


@app.post("/api/chat", response_model=ChatResponse)
def chat(request: ChatRequest):
    name = ""
    allergies: List[str] = []
    if request.user_id:
        profile = profile_store.get_profile(request.user_id)
        if profile:
            name = profile.name
        allergies = profile_store.get_allergies(request.user_id)
    return chat_assistant.respond(request.message, allergies=allergies, name=name)
