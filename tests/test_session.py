"""Tests for the session state controller."""

import asyncio
import json

import pytest

from culinalens.errors import AcquisitionFailed, InvalidRequest, RecipeNotFound
from culinalens.generate.base import GenerationError
from culinalens.normalize import MALFORMED_MESSAGE, normalize_recipe
from culinalens.schemas import DayOfWeek, MealType, SearchMode
from culinalens.session import (
    EMPTY_PANTRY_MESSAGE,
    TIMEOUT_MESSAGE,
    UNEXPECTED_MESSAGE,
    RecipeSessionController,
)


@pytest.fixture
def controller(gateway) -> RecipeSessionController:
    """Controller over the stub gateway with no deadline."""
    return RecipeSessionController(gateway, acquisition_timeout=0)


class TestNavigationAndPantry:
    """Tests for mode switching and the pantry list."""

    def test_set_mode_clears_error(self, controller):
        """Test switching mode drops the previous error but keeps recipes."""
        controller.state = controller.state.model_copy(update={"error": "boom"})

        state = controller.set_mode(SearchMode.PLANNER)

        assert state.mode == SearchMode.PLANNER
        assert state.error is None

    def test_add_and_remove_pantry(self, controller):
        """Test ingredients are trimmed and removed by position."""
        controller.add_pantry_ingredient(" eggs ")
        controller.add_pantry_ingredient("spinach")
        controller.add_pantry_ingredient("   ")

        assert controller.state.pantry == ["eggs", "spinach"]

        controller.remove_pantry_ingredient(0)
        controller.remove_pantry_ingredient(7)

        assert controller.state.pantry == ["spinach"]


class TestAcquisition:
    """Tests for acquisition sequencing."""

    @pytest.mark.asyncio
    async def test_submit_dish_name(self, controller, stub_client, recipe_json):
        """Test a successful acquisition replaces recipes and clears loading."""
        stub_client.responses.append(recipe_json)

        outcome = await controller.submit_dish_name("Omelette")

        assert len(outcome.recipes) == 1
        assert outcome.ok
        assert controller.state.recipes == outcome.recipes
        assert controller.state.loading.is_loading is False
        assert controller.state.error is None

    @pytest.mark.asyncio
    async def test_blank_dish_name_ignored(self, controller, stub_client):
        """Test a blank name does nothing."""
        outcome = await controller.submit_dish_name("  ")
        assert stub_client.calls == []
        assert outcome.recipes == []
        assert controller.state.loading.is_loading is False

    @pytest.mark.asyncio
    async def test_submit_image(self, controller, stub_client, recipe_json):
        """Test photo submission yields one recipe."""
        stub_client.responses.append(recipe_json)

        outcome = await controller.submit_image(b"bytes", "image/png")

        assert [r.title for r in outcome.recipes] == ["Spinach and Feta Omelette"]

    @pytest.mark.asyncio
    async def test_submit_ingredients_from_pantry(
        self, controller, stub_client, recipe_payload, second_recipe_payload
    ):
        """Test the pantry list is used when no ingredients are given."""
        stub_client.responses.append(json.dumps([recipe_payload, second_recipe_payload]))
        controller.add_pantry_ingredient("egg")
        controller.add_pantry_ingredient("spinach")

        outcome = await controller.submit_ingredients()

        assert len(outcome.recipes) == 2
        prompt, _ = stub_client.calls[0]
        assert "egg, spinach" in prompt

    @pytest.mark.asyncio
    async def test_empty_pantry(self, controller, stub_client):
        """Test searching with no ingredients sets an error without a call."""
        outcome = await controller.submit_ingredients()

        assert outcome.error == EMPTY_PANTRY_MESSAGE
        assert isinstance(outcome.exception, InvalidRequest)
        assert controller.state.error == EMPTY_PANTRY_MESSAGE
        assert stub_client.calls == []

    @pytest.mark.asyncio
    async def test_loading_state_while_in_flight(self, controller, gateway, recipe_json):
        """Test loading is shown while the model call is pending."""
        seen = {}

        async def slow_recipe_by_name(name):
            seen["loading"] = controller.state.loading
            return normalize_recipe(recipe_json)

        gateway.recipe_by_name = slow_recipe_by_name

        await controller.submit_dish_name("Omelette")

        assert seen["loading"].is_loading is True
        assert seen["loading"].message == "Creating your recipe..."

    @pytest.mark.asyncio
    async def test_malformed_response_sets_error(self, controller, stub_client):
        """Test an unparseable answer becomes a user message."""
        stub_client.responses.append("not json")

        outcome = await controller.submit_dish_name("Omelette")

        assert outcome.error == MALFORMED_MESSAGE
        assert outcome.recipes == []
        assert controller.state.error == MALFORMED_MESSAGE
        assert controller.state.loading.is_loading is False

    @pytest.mark.asyncio
    async def test_failure_keeps_meal_plan(self, controller, stub_client, recipe_json):
        """Test a failed acquisition does not touch the plan."""
        stub_client.responses.append(recipe_json)
        outcome = await controller.submit_dish_name("Omelette")
        recipe = outcome.recipes[0]
        controller.add_to_plan(recipe, DayOfWeek.MONDAY, MealType.DINNER)

        stub_client.responses.append(GenerationError("down", status_code=503))
        outcome = await controller.submit_dish_name("Pancakes")

        assert outcome.error.startswith("Recipe service is unavailable")
        planned = controller.state.meal_plan.meals_for(DayOfWeek.MONDAY, MealType.DINNER)
        assert planned[0].recipe == recipe

    @pytest.mark.asyncio
    async def test_empty_response_message(self, controller, stub_client):
        """Test no text from the model is reported."""
        stub_client.responses.append(None)
        outcome = await controller.submit_dish_name("Omelette")
        assert outcome.error == "No response from AI"

    @pytest.mark.asyncio
    async def test_timeout(self, gateway, recipe_json):
        """Test a hung call is cut off by the deadline."""
        controller = RecipeSessionController(gateway, acquisition_timeout=0.01)

        async def hang(name):
            await asyncio.sleep(1)

        gateway.recipe_by_name = hang

        outcome = await controller.submit_dish_name("Omelette")

        assert outcome.error == TIMEOUT_MESSAGE
        assert controller.state.loading.is_loading is False

    @pytest.mark.asyncio
    async def test_superseded_response_discarded(self, controller, gateway, make_recipe):
        """Test a late answer to an older request does not overwrite newer results."""
        release_first = asyncio.Event()
        old = make_recipe(title="Old")
        new = make_recipe(title="New")

        async def recipe_by_name(name):
            if name == "first":
                await release_first.wait()
                return old
            return new

        gateway.recipe_by_name = recipe_by_name

        first = asyncio.create_task(controller.submit_dish_name("first"))
        await asyncio.sleep(0)
        second = await controller.submit_dish_name("second")
        release_first.set()
        stale = await first

        assert [r.title for r in controller.state.recipes] == ["New"]
        assert controller.generation == 2
        assert second.ok
        assert stale.superseded
        assert [r.title for r in stale.recipes] == ["Old"]

    @pytest.mark.asyncio
    async def test_superseded_failure_discarded(self, controller, gateway, make_recipe):
        """Test a late failure of an older request leaves newer results alone."""
        release_first = asyncio.Event()
        new = make_recipe(title="New")

        async def recipe_by_name(name):
            if name == "first":
                await release_first.wait()
                raise AcquisitionFailed(GenerationError("late"))
            return new

        gateway.recipe_by_name = recipe_by_name

        first = asyncio.create_task(controller.submit_dish_name("first"))
        await asyncio.sleep(0)
        await controller.submit_dish_name("second")
        release_first.set()
        stale = await first

        assert stale.superseded
        assert stale.error is None
        assert controller.state.error is None
        assert [r.title for r in controller.state.recipes] == ["New"]

    @pytest.mark.asyncio
    async def test_in_flight_outcome_not_taken_from_newer_request(
        self, controller, gateway, make_recipe
    ):
        """Test an older request still reports superseded while the newer one is pending."""
        first_started = asyncio.Event()
        release = asyncio.Event()

        async def recipe_by_name(name):
            if name == "first":
                first_started.set()
            await release.wait()
            return make_recipe(title=name)

        gateway.recipe_by_name = recipe_by_name

        first = asyncio.create_task(controller.submit_dish_name("first"))
        await first_started.wait()
        second = asyncio.create_task(controller.submit_dish_name("second"))
        await asyncio.sleep(0)
        release.set()
        stale, fresh = await asyncio.gather(first, second)

        assert stale.superseded
        assert not stale.ok
        assert [r.title for r in fresh.recipes] == ["second"]
        assert [r.title for r in controller.state.recipes] == ["second"]

    @pytest.mark.asyncio
    async def test_unexpected_error_clears_loading(self, controller, gateway):
        """Test a non-recipe exception still ends loading with a generic message."""

        async def broken(name):
            raise KeyError("title")

        gateway.recipe_by_name = broken

        outcome = await controller.submit_dish_name("Omelette")

        assert outcome.error == UNEXPECTED_MESSAGE
        assert isinstance(outcome.exception, KeyError)
        assert controller.state.error == UNEXPECTED_MESSAGE
        assert controller.state.loading.is_loading is False
        assert controller.state.recipes == []

    @pytest.mark.asyncio
    async def test_oversized_model_number_is_malformed(self, controller, stub_client):
        """Test hostile model output ends as a malformed-response error."""
        stub_client.responses.append('{"title": ' + "9" * 5000 + "}")

        outcome = await controller.submit_dish_name("pie")

        assert outcome.error == MALFORMED_MESSAGE
        assert controller.state.loading.is_loading is False


class TestReviewsAndPlanning:
    """Tests for review and plan actions routed through the controller."""

    @pytest.mark.asyncio
    async def test_add_review_updates_results_and_plan(self, controller, stub_client, recipe_json):
        """Test a review shows up in the results and in planned copies."""
        stub_client.responses.append(recipe_json)
        outcome = await controller.submit_dish_name("Omelette")
        recipe = outcome.recipes[0]
        controller.add_to_plan(recipe, DayOfWeek.MONDAY, MealType.BREAKFAST)

        updated = controller.add_review(recipe.id, 4, "Nice", "Robin")

        assert updated.rating == 4.0
        assert controller.state.recipes[0].rating == 4.0
        planned = controller.state.meal_plan.meals_for(DayOfWeek.MONDAY, MealType.BREAKFAST)
        assert planned[0].recipe.rating == 4.0

    def test_review_planned_only_recipe(self, controller, make_recipe):
        """Test recipes no longer in the results can still be reviewed from the plan."""
        recipe = make_recipe()
        controller.add_to_plan(recipe, DayOfWeek.FRIDAY, MealType.DINNER)

        controller.add_review(recipe.id, 2, "Too salty", "Max")

        planned = controller.state.meal_plan.meals_for(DayOfWeek.FRIDAY, MealType.DINNER)
        assert planned[0].recipe.rating == 2.0

    def test_review_unknown_recipe(self, controller):
        """Test reviewing a missing recipe raises RecipeNotFound."""
        with pytest.raises(RecipeNotFound):
            controller.add_review("missing", 3, "ok", "Ann")

    def test_plan_round_trip(self, controller, make_recipe):
        """Test add, duplicate add, then remove leaves the slot empty."""
        recipe = make_recipe()
        controller.add_to_plan(recipe, DayOfWeek.MONDAY, MealType.DINNER)
        controller.add_to_plan(recipe, DayOfWeek.MONDAY, MealType.DINNER)
        plan = controller.remove_from_plan(DayOfWeek.MONDAY, MealType.DINNER, recipe.id)

        assert plan.meals_for(DayOfWeek.MONDAY, MealType.DINNER) == []
        assert controller.state.meal_plan is plan

    def test_reset(self, controller, make_recipe):
        """Test reset clears plan and pantry."""
        controller.add_pantry_ingredient("rice")
        controller.add_to_plan(make_recipe(), DayOfWeek.MONDAY, MealType.DINNER)

        state = controller.reset()

        assert state.pantry == []
        assert state.meal_plan.is_empty
