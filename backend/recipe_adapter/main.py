"""
FastAPI application entry point and endpoint definitions.

This module initializes the FastAPI application and defines all API routes
for the dietary recipe adaptation workflow.

Responsibilities:
- Initialize FastAPI application with CORS and error handling
- Wire services onto app.state (recipe store, adaptation service,
  proposal store, FODMAP dataset) so tests can swap them
- Define recipe, adaptation, review and FODMAP endpoints
- Translate service errors into HTTP responses
"""

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import List, Optional
import logging

from recipe_adapter.config import settings
from recipe_adapter.models.adaptation import (
    AdaptationProposal,
    AdaptRequest,
    AdaptResponse,
    ChoiceUpdateRequest,
    CommitResponse,
    FodmapRateRequest,
)
from recipe_adapter.models.fodmap import IngredientRating
from recipe_adapter.models.recipe import Recipe
from recipe_adapter.services.adaptation_service import RecipeAdaptationService
from recipe_adapter.services.fodmap_dataset import FodmapDatasetService
from recipe_adapter.services.llm_adapter import GeminiGenerator, GenerationCapability
from recipe_adapter.services.proposal_commit import commit_proposal
from recipe_adapter.services.proposal_store import NoPendingProposalError, ProposalStore
from recipe_adapter.services.recipe_store import JsonRecipeStore, RecipeStoreError
from recipe_adapter.utils.constants import ALLERGY_OPTIONS, DIETARY_OPTIONS
from recipe_adapter.utils.validators import validate_recipe_id

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== Dependencies ====================

def get_recipe_store(request: Request) -> JsonRecipeStore:
    return request.app.state.recipe_store


def get_adaptation_service(request: Request) -> RecipeAdaptationService:
    return request.app.state.adaptation_service


def get_proposal_store(request: Request) -> ProposalStore:
    return request.app.state.proposal_store


def get_fodmap_service(request: Request) -> FodmapDatasetService:
    return request.app.state.fodmap_service


def _default_generator() -> Optional[GenerationCapability]:
    """Gemini generator when AI adaptation is enabled and a key is set."""
    if not settings.USE_AI_ADAPTATION:
        logger.info("AI adaptation disabled by configuration")
        return None
    generator = GeminiGenerator()
    return generator if generator.available else None


def _no_proposal() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="No adaptation pending"
    )


def create_app(
    recipe_store: Optional[JsonRecipeStore] = None,
    generator: Optional[GenerationCapability] = None,
    fodmap_service: Optional[FodmapDatasetService] = None,
    use_ai: Optional[bool] = None,
) -> FastAPI:
    """
    Initialize and configure the FastAPI application.

    Sets up:
    - CORS middleware for frontend communication
    - Exception handlers for consistent error responses
    - Service instances on app.state
    - Application metadata

    Args:
        recipe_store: Recipe store (defaults to the configured JSON file)
        generator: AI collaborator (defaults to Gemini when configured)
        fodmap_service: FODMAP dataset service
        use_ai: Force AI on/off; when False the generator is ignored

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="Dietary Recipe Adaptation API",
        description="Adapts saved recipes for diets and allergies, with low-FODMAP awareness",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Configure CORS to allow frontend communication
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handler for consistent error responses
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Handle all uncaught exceptions with consistent error format.

        Args:
            request: The incoming request object
            exc: The exception that was raised

        Returns:
            JSONResponse: Formatted error response
        """
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error occurred",
                "error": str(exc)
            }
        )

    if use_ai is False:
        generator = None
    elif generator is None:
        generator = _default_generator()

    app.state.recipe_store = recipe_store or JsonRecipeStore(settings.RECIPE_STORE_PATH)
    app.state.adaptation_service = RecipeAdaptationService(
        generator=generator,
        use_structured_output=settings.LLM_STRUCTURED_OUTPUT,
    )
    app.state.proposal_store = ProposalStore()
    app.state.fodmap_service = fodmap_service or FodmapDatasetService()

    app.include_router(router)
    return app


# ==================== Status Endpoints ====================

@router.get("/")
async def root():
    """
    Root endpoint for health check.

    Returns:
        dict: API status and version information
    """
    return {
        "message": "Dietary Recipe Adaptation API",
        "version": "1.0.0",
        "status": "running"
    }


@router.get("/health")
async def health_check(
    request: Request,
    recipe_store: JsonRecipeStore = Depends(get_recipe_store),
):
    """
    Health check endpoint for monitoring and deployment.

    Returns:
        dict: Service status and configuration summary
    """
    ai_enabled = request.app.state.adaptation_service.generator is not None

    warnings = []
    if not ai_enabled:
        warnings.append("AI adaptation disabled - built-in substitutions will be used")

    return {
        "status": "healthy",
        "service": "recipe-adaptation-api",
        "configuration": {
            "ai_adaptation_enabled": ai_enabled,
            "llm_model": settings.LLM_MODEL if ai_enabled else None,
            "fodmap_dataset_url": settings.FODMAP_DATASET_URL,
            "recipe_count": len(recipe_store.list_recipes()),
        },
        "warnings": warnings if warnings else None
    }


@router.get("/options")
async def get_options():
    """Dietary and allergy options offered to the user."""
    return {"diets": DIETARY_OPTIONS, "allergies": ALLERGY_OPTIONS}


# ==================== Recipe Endpoints ====================

@router.get("/recipes", response_model=List[Recipe])
async def list_recipes(recipe_store: JsonRecipeStore = Depends(get_recipe_store)):
    """Return all saved recipes."""
    recipes = recipe_store.list_recipes()
    logger.info(f"Fetching {len(recipes)} recipes")
    return recipes


@router.post("/recipes", response_model=Recipe, status_code=status.HTTP_201_CREATED)
async def save_recipe(
    recipe: Recipe,
    recipe_store: JsonRecipeStore = Depends(get_recipe_store),
):
    """
    Save (insert or replace) a recipe.

    Raises:
        HTTPException: 503 if the store could not be written
    """
    try:
        saved = recipe_store.save_recipe(recipe)
        logger.info(f"Saved recipe: {saved.title}")
        return saved
    except RecipeStoreError as e:
        logger.error(f"Error saving recipe: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not save recipe"
        )


@router.get("/recipes/{recipe_id}", response_model=Recipe)
async def get_recipe(
    recipe_id: str,
    recipe_store: JsonRecipeStore = Depends(get_recipe_store),
):
    """Return one saved recipe."""
    try:
        validate_recipe_id(recipe_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    recipe = recipe_store.get_recipe(recipe_id)
    if recipe is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recipe '{recipe_id}' not found"
        )
    return recipe


@router.delete("/recipes/{recipe_id}")
async def delete_recipe(
    recipe_id: str,
    recipe_store: JsonRecipeStore = Depends(get_recipe_store),
):
    """
    Delete a saved recipe.

    Used after a commit when the user confirms removing the original.
    """
    try:
        validate_recipe_id(recipe_id)
        if not recipe_store.delete_recipe(recipe_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Recipe '{recipe_id}' not found"
            )
        return {"deleted": recipe_id}
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RecipeStoreError as e:
        logger.error(f"Error deleting recipe {recipe_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not delete recipe"
        )


# ==================== Adaptation Endpoints ====================

@router.post("/adapt", response_model=AdaptResponse)
def adapt_recipe(
    request: AdaptRequest,
    recipe_store: JsonRecipeStore = Depends(get_recipe_store),
    service: RecipeAdaptationService = Depends(get_adaptation_service),
    proposals: ProposalStore = Depends(get_proposal_store),
) -> AdaptResponse:
    """
    Adapt a recipe and make it the pending proposal.

    The AI collaborator is tried first when configured; on any failure the
    built-in substitution rules are used and ``used_fallback`` is set.

    Args:
        request: AdaptRequest with recipe_id or inline recipe, diets,
            allergies and optional custom allergies

    Returns:
        AdaptResponse: The new proposal plus status message and summary

    Raises:
        HTTPException: 404 if recipe_id is unknown, 422 if the recipe has no
            ingredients, 500 if processing fails
    """
    try:
        recipe = request.recipe
        if recipe is None:
            recipe = recipe_store.get_recipe(request.recipe_id)
            if recipe is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Recipe '{request.recipe_id}' not found"
                )

        logger.info(
            f"Adapting recipe '{recipe.title}' for diets={request.diets}, "
            f"allergies={request.allergies}"
        )
        outcome = service.adapt(
            recipe,
            request.diets,
            request.allergies,
            request.custom_allergies,
        )
        proposal = proposals.set_proposal(
            recipe, outcome.adapted, outcome.diets, outcome.allergies
        )

        return AdaptResponse(
            proposal=proposal,
            used_fallback=outcome.used_fallback,
            message=outcome.message,
            summary=outcome.summary,
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error adapting recipe: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to adapt recipe: {str(e)}"
        )


# ==================== Review Endpoints ====================

@router.get("/proposal", response_model=AdaptationProposal)
async def get_proposal(proposals: ProposalStore = Depends(get_proposal_store)):
    """Return the pending proposal, or 404 when none is pending."""
    snapshot = proposals.snapshot()
    if snapshot is None:
        raise _no_proposal()
    return snapshot


@router.put("/proposal/choices/{index}", response_model=AdaptationProposal)
async def update_choice(
    index: int,
    update: ChoiceUpdateRequest,
    proposals: ProposalStore = Depends(get_proposal_store),
):
    """Override one ingredient choice with a picked or free-form name."""
    try:
        proposals.update_choice(index, update.adapted_name, update.accepted)
        return proposals.snapshot()
    except NoPendingProposalError:
        raise _no_proposal()
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/proposal/accept-all", response_model=AdaptationProposal)
async def accept_all(proposals: ProposalStore = Depends(get_proposal_store)):
    """Accept every choice that differs from the original."""
    try:
        proposals.accept_all()
        return proposals.snapshot()
    except NoPendingProposalError:
        raise _no_proposal()


@router.post("/proposal/reset-all", response_model=AdaptationProposal)
async def reset_all(proposals: ProposalStore = Depends(get_proposal_store)):
    """Revert every choice to the original ingredient."""
    try:
        proposals.reset_all()
        return proposals.snapshot()
    except NoPendingProposalError:
        raise _no_proposal()


@router.delete("/proposal")
async def discard_proposal(proposals: ProposalStore = Depends(get_proposal_store)):
    """Discard the pending proposal (no-op when none is pending)."""
    proposals.clear()
    return {"status": "cleared"}


@router.post("/proposal/commit", response_model=CommitResponse)
async def commit(
    proposals: ProposalStore = Depends(get_proposal_store),
    recipe_store: JsonRecipeStore = Depends(get_recipe_store),
) -> CommitResponse:
    """
    Save the reviewed proposal as a new recipe.

    The original recipe is kept; the response names it so the client can
    offer deleting it.

    Raises:
        HTTPException: 404 if nothing is pending, 503 if saving failed (the
            proposal stays pending so the save can be retried)
    """
    try:
        original_id = proposals.proposal.original.id if proposals.has_proposal else None
        recipe = commit_proposal(proposals, recipe_store)
        logger.info(f"Committed adapted recipe {recipe.id} from {original_id}")
        return CommitResponse(recipe=recipe, original_id=original_id)

    except NoPendingProposalError:
        raise _no_proposal()
    except RecipeStoreError as e:
        logger.error(f"Error saving adapted recipe: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not save adapted recipe"
        )


# ==================== FODMAP Endpoints ====================

@router.post("/fodmap/rate", response_model=List[IngredientRating])
def rate_ingredients(
    request: FodmapRateRequest,
    fodmap_service: FodmapDatasetService = Depends(get_fodmap_service),
) -> List[IngredientRating]:
    """
    Rate ingredient names against the public FODMAP food list.

    Ingredients with no dataset match are rated "unknown". An unavailable
    dataset rates everything "unknown" rather than failing.
    """
    try:
        return fodmap_service.rate_ingredients(request.ingredients, request.force_refresh)
    except Exception as e:
        logger.error(f"Error rating ingredients: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to rate ingredients: {str(e)}"
        )


# Initialize FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn

    # Run the application
    # For development only - use uvicorn command in production
    uvicorn.run(
        "recipe_adapter.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
