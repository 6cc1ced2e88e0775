"""FastAPI application factory."""

import logging
from typing import Any

from fastapi import Body, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from menu_planner.api.models import (
    BallotPayload,
    ManualPlanPayload,
    WeeklyOptionsPayload,
)
from menu_planner.app_logging import configure_logging
from menu_planner.containers import AppContainer
from menu_planner.domain.catalog import Catalog, Category, Dish
from menu_planner.domain.options import CandidateOption, OptionSet
from menu_planner.domain.plans import ManualSelection, PlanFailure, PlanResult
from menu_planner.domain.votes import Ballot
from menu_planner.services.catalog import CatalogError
from menu_planner.services.options import OptionSetError
from menu_planner.services.votes import BallotRejectedError, OptionCount

_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/meals-database")
    async def get_meals_database(request: Request) -> dict[str, object]:
        """Return the dish catalog."""
        state_container: AppContainer = request.app.state.container
        try:
            catalog = state_container.catalog_service.get_catalog()
        except Exception as exc:
            logger.exception("Failed to read meals database")
            raise _server_error("Failed to read meals database") from exc
        return _serialize_catalog(catalog)

    @app.post("/api/meals-database")
    async def save_meals_database(
        request: Request, payload: dict[str, Any] = Body(...)
    ) -> dict[str, object]:
        """Replace the catalog. Options, votes and the plan are reset."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.catalog_service.save_catalog(payload)
        except CatalogError as exc:
            raise HTTPException(
                status_code=_UNPROCESSABLE, detail=str(exc)
            ) from exc
        except Exception as exc:
            logger.exception("Failed to save meals database")
            raise _server_error("Failed to save meals database") from exc
        return {
            "success": True,
            "message": "Meals database saved successfully (system reset)",
        }

    @app.get("/api/weekly-options")
    async def get_weekly_options(request: Request) -> dict[str, object]:
        """Return this week's candidate options."""
        state_container: AppContainer = request.app.state.container
        try:
            options = state_container.option_service.get_options()
        except Exception as exc:
            logger.exception("Failed to read weekly options")
            raise _server_error("Failed to read weekly options") from exc
        return _serialize_options(options)

    @app.post("/api/weekly-options")
    async def save_weekly_options(
        payload: WeeklyOptionsPayload, request: Request
    ) -> dict[str, object]:
        """Replace this week's candidate options."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.option_service.save_options(
                meat=[option.model_dump() for option in payload.meat_options],
                fish=[option.model_dump() for option in payload.fish_options],
                vegetarian=[
                    option.model_dump() for option in payload.vegetarian_options
                ],
            )
        except OptionSetError as exc:
            raise HTTPException(
                status_code=_UNPROCESSABLE, detail=str(exc)
            ) from exc
        except Exception as exc:
            logger.exception("Failed to save weekly options")
            raise _server_error("Failed to save weekly options") from exc
        return {"success": True, "message": "Weekly options saved successfully"}

    @app.get("/api/guest-votes")
    async def get_guest_votes(request: Request) -> dict[str, object]:
        """Return every submitted ballot."""
        state_container: AppContainer = request.app.state.container
        try:
            ballots = state_container.vote_service.list_ballots()
        except Exception as exc:
            logger.exception("Failed to read guest votes")
            raise _server_error("Failed to read guest votes") from exc
        return {"votes": [_serialize_ballot(ballot) for ballot in ballots]}

    @app.post("/api/guest-votes")
    async def submit_guest_vote(
        payload: BallotPayload, request: Request
    ) -> dict[str, object]:
        """Record a guest's ballot."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.vote_service.submit_ballot(
                guest_name=payload.guest_name,
                meat_option_id=payload.meat_option_id,
                fish_option_id=payload.fish_option_id,
                vegetarian_option_ids=payload.vegetarian_option_ids,
            )
        except BallotRejectedError as exc:
            raise HTTPException(
                status_code=_UNPROCESSABLE, detail=str(exc)
            ) from exc
        except Exception as exc:
            logger.exception("Failed to save guest vote")
            raise _server_error("Failed to save guest votes") from exc
        return {"success": True, "message": "Vote submitted successfully"}

    @app.get("/api/vote-results")
    async def vote_results(request: Request) -> dict[str, object]:
        """Return vote counts per category, most voted first."""
        state_container: AppContainer = request.app.state.container
        try:
            counts = state_container.vote_service.vote_counts()
        except Exception as exc:
            logger.exception("Failed to read vote results")
            raise _server_error("Failed to read vote results") from exc
        return {
            category.value: [_serialize_count(entry) for entry in entries]
            for category, entries in counts.items()
        }

    @app.get("/api/meal-plan")
    async def get_meal_plan(request: Request) -> dict[str, object]:
        """Return the current weekly plan."""
        state_container: AppContainer = request.app.state.container
        try:
            plan = state_container.plan_service.get_plan()
        except Exception as exc:
            logger.exception("Failed to read meal plan")
            raise _server_error("Failed to read meal plan") from exc
        return plan.to_dict()

    @app.post("/api/meal-plan/generate", response_model=None)
    async def generate_meal_plan(
        request: Request,
    ) -> dict[str, object] | JSONResponse:
        """Resolve the votes into a weekly plan."""
        state_container: AppContainer = request.app.state.container
        try:
            result = state_container.plan_service.generate_plan()
        except Exception as exc:
            logger.exception("Failed to generate meal plan")
            raise _server_error("Failed to generate meal plan") from exc
        return _plan_response(result)

    @app.post("/api/meal-plan", response_model=None)
    async def save_meal_plan(
        payload: ManualPlanPayload, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Store an operator-chosen weekly plan."""
        state_container: AppContainer = request.app.state.container
        selection = ManualSelection(
            monday_id=payload.monday,
            tuesday_id=payload.tuesday,
            wednesday_id=payload.wednesday,
            thursday_id=payload.thursday,
        )
        try:
            result = state_container.plan_service.save_manual_plan(selection)
        except Exception as exc:
            logger.exception("Failed to save meal plan")
            raise _server_error("Failed to save meal plan") from exc
        return _plan_response(result)

    @app.post("/api/reset")
    async def reset(request: Request) -> dict[str, object]:
        """Clear options, votes and plan. The catalog is kept."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.plan_service.reset()
        except Exception as exc:
            logger.exception("Failed to reset system")
            raise _server_error("Failed to reset system") from exc
        return {"success": True, "message": "System reset successfully"}

    return app


def _server_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail
    )


def _plan_response(result: PlanResult) -> dict[str, object] | JSONResponse:
    """Return the plan, or a 409 describing why no plan was produced."""
    if isinstance(result, PlanFailure):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": result.kind.value, "message": result.message},
        )
    return result.to_dict()


def _serialize_dish(dish: Dish) -> dict[str, object]:
    return {
        "id": dish.id,
        "name": dish.name,
        "vegetarian": dish.category is Category.VEGETARIAN,
        "vegan": dish.vegan,
        "category": dish.category.value,
    }


def _serialize_catalog(catalog: Catalog) -> dict[str, object]:
    """Serialize the catalog to its upload shape."""
    return {
        "meals": [
            _serialize_dish(dish)
            for dish in sorted(catalog.dishes, key=lambda dish: dish.name)
        ],
        "meal_combinations": [
            {
                "id": combo.id,
                "name": combo.name,
                "meals": [_serialize_dish(dish) for dish in combo.dishes],
            }
            for combo in sorted(catalog.combos, key=lambda combo: combo.name)
        ],
        "last_updated": catalog.updated_at,
    }


def _serialize_option(option: CandidateOption) -> dict[str, str]:
    return {"id": option.id, "name": option.name}


def _serialize_options(options: OptionSet) -> dict[str, object]:
    return {
        "meat_options": [_serialize_option(option) for option in options.meat],
        "fish_options": [_serialize_option(option) for option in options.fish],
        "vegetarian_options": [
            _serialize_option(option) for option in options.vegetarian
        ],
        "last_updated": options.last_updated,
    }


def _serialize_ballot(ballot: Ballot) -> dict[str, object]:
    return {
        "guest_name": ballot.guest_name,
        "meat_option_id": ballot.meat_option_id,
        "fish_option_id": ballot.fish_option_id,
        "vegetarian_option_ids": list(ballot.vegetarian_option_ids),
        "voted_at": ballot.voted_at.isoformat() if ballot.voted_at else None,
    }


def _serialize_count(entry: OptionCount) -> dict[str, object]:
    return {"id": entry.option_id, "name": entry.name, "votes": entry.votes}
