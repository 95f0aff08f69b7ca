"""Unit tests for the AI orchestrator, its handlers and cost accounting."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from common.ai import AIProvider, AIProviderError
from common.ai.base import AICompletion, parse_json_object
from common.utils.exceptions import BadRequestException
from sharp.services.ai.handlers import FoodParseHandler, ModelConfig, WorkoutParseHandler
from sharp.services.ai.orchestrator import AIOrchestrator, calculate_cost


class FakeProvider(AIProvider):
    """Returns a canned completion and records the last call."""

    name = "fake"

    def __init__(self, text="", model="gpt-4o-mini-2024-07-18", input_tokens=700, output_tokens=300):
        self.text = text
        self.model = model
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.calls = []

    async def complete(self, message, system_prompt=None, max_tokens=1024,
                       temperature=0.7, json_mode=False, **kwargs):
        self.calls.append({"message": message, "json_mode": json_mode, "temperature": temperature})
        return AICompletion(
            text=self.text,
            model=self.model,
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
        )


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def user_service():
    service = MagicMock()
    service.get_subscription_tier = AsyncMock(return_value="free")
    return service


@pytest.fixture
def usage_service():
    service = MagicMock()
    service.count_monthly_usage = AsyncMock(return_value=0)
    service.track = AsyncMock(return_value={})
    return service


def make_orchestrator(mock_db, user_service, usage_service, provider=None):
    return AIOrchestrator(mock_db, user_service, usage_service, provider=provider)


# ─────────────────────────────────────────────────────────────────
# calculate_cost
# ─────────────────────────────────────────────────────────────────


class TestCalculateCost:
    def test_seventy_thirty_split(self):
        # 70k input * $0.00015/1k + 30k output * $0.0006/1k = $0.0285
        assert calculate_cost(100_000, "gpt-4o-mini") == pytest.approx(2.85, abs=0.01)

    def test_dated_model_uses_longest_prefix(self):
        assert calculate_cost(100_000, "gpt-4o-mini-2024-07-18") == calculate_cost(100_000, "gpt-4o-mini")
        assert calculate_cost(100_000, "gpt-4o-2024-08-06") == pytest.approx(47.5, abs=0.01)

    def test_unknown_model_is_free(self):
        assert calculate_cost(5000, "local") == 0.0
        assert calculate_cost(5000, None) == 0.0


# ─────────────────────────────────────────────────────────────────
# process_request
# ─────────────────────────────────────────────────────────────────


class TestProcessRequest:
    @pytest.mark.asyncio
    async def test_free_user_at_limit_refused(self, mock_db, user_service, usage_service, sample_user_id):
        usage_service.count_monthly_usage.return_value = 10
        provider = FakeProvider()
        orchestrator = make_orchestrator(mock_db, user_service, usage_service, provider)

        response = await orchestrator.process_request("parse_workout", "ran 5k", sample_user_id)

        assert response.success is False
        assert response.limit_reached is True
        assert response.error.startswith("Monthly limit reached (10/10)")
        assert "Upgrade to Pro" in response.error
        assert provider.calls == []
        usage_service.track.assert_not_called()

    @pytest.mark.asyncio
    async def test_elite_user_unlimited(self, mock_db, mock_collection, user_service, usage_service, sample_user_id):
        user_service.get_subscription_tier.return_value = "elite"
        usage_service.count_monthly_usage.return_value = 5000
        provider = FakeProvider(text="Keep your runs easy this week.")
        orchestrator = make_orchestrator(mock_db, user_service, usage_service, provider)

        response = await orchestrator.process_request("coach_chat", "How should I train?", sample_user_id)

        assert response.success is True
        assert response.data == {"reply": "Keep your runs easy this week."}
        assert response.tokens_used == 1000
        assert response.model_used == "gpt-4o-mini-2024-07-18"

        mock_collection.insert_one.assert_called_once()
        context = mock_collection.insert_one.call_args[0][0]
        assert context["requestType"] == "coach_chat"
        assert context["userId"] == ObjectId(sample_user_id)

        usage_service.track.assert_called_once()
        assert usage_service.track.call_args[0][1] == "ai_coaching"
        assert usage_service.track.call_args[1]["tier"] == "elite"

    @pytest.mark.asyncio
    async def test_handler_failure_records_failed_event(
        self, mock_db, mock_collection, user_service, usage_service, sample_user_id,
    ):
        provider = FakeProvider(text="this is not json")
        orchestrator = make_orchestrator(mock_db, user_service, usage_service, provider)

        response = await orchestrator.process_request("parse_food", "two eggs", sample_user_id)

        assert response.success is False
        assert response.limit_reached is False
        assert response.error == "AI response was not valid JSON"
        usage_service.track.assert_called_once_with(
            sample_user_id, "food_parsing", tier="free", success=False
        )
        mock_collection.insert_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_workout_falls_back_to_local_parser(self, mock_db, user_service, usage_service, sample_user_id):
        orchestrator = make_orchestrator(mock_db, user_service, usage_service, provider=None)

        response = await orchestrator.process_request(
            "parse_workout", "bench press 3x8 @ 135lbs", sample_user_id
        )

        assert response.success is True
        assert response.model_used == "local"
        assert response.cost_cents == 0.0
        assert response.confidence == 0.8
        assert response.data["exercises"][0]["sets"][0]["weightKg"] == 61.23

    @pytest.mark.asyncio
    async def test_food_without_provider_fails(self, mock_db, user_service, usage_service, sample_user_id):
        orchestrator = make_orchestrator(mock_db, user_service, usage_service, provider=None)

        response = await orchestrator.process_request("parse_food", "a banana", sample_user_id)

        assert response.success is False
        assert response.error == "AI provider is not configured"

    @pytest.mark.asyncio
    async def test_unknown_request_type(self, mock_db, user_service, usage_service, sample_user_id):
        orchestrator = make_orchestrator(mock_db, user_service, usage_service)

        with pytest.raises(BadRequestException):
            await orchestrator.process_request("write_poem", "roses", sample_user_id)


# ─────────────────────────────────────────────────────────────────
# Handlers
# ─────────────────────────────────────────────────────────────────


class TestHandlers:
    @pytest.mark.asyncio
    async def test_workout_handler_normalizes_exercises(self):
        provider = FakeProvider(text="""```json
        {"workoutType": "bogus", "confidence": 1.4,
         "exercises": [{"name": "Bench Press", "type": "reps",
                        "sets": [{"reps": "8", "weightKg": 60}]}]}
        ```""")

        result = await WorkoutParseHandler(provider).process("bench", ModelConfig(0.2, 1000))

        assert provider.calls[0]["json_mode"] is True
        assert result.data["workoutType"] == "strength"
        assert result.data["exercises"][0]["sets"][0]["reps"] == 8
        assert result.confidence == 1.0

    @pytest.mark.asyncio
    async def test_food_handler_averages_confidence(self):
        provider = FakeProvider(text="""
        {"mealType": "breakfast", "foods": [
            {"name": "egg", "quantity": 2, "unit": "large", "kcal": 140, "confidence": 0.9},
            {"name": "toast", "quantity": 1, "unit": "slice", "kcal": 80, "confidence": 0.7}
        ]}
        """)

        result = await FoodParseHandler(provider).process("2 eggs and toast", ModelConfig(0.2, 1000))

        assert result.data["mealType"] == "breakfast"
        assert [f["name"] for f in result.data["foods"]] == ["egg", "toast"]
        assert result.data["foods"][1]["proteinG"] == 0.0
        assert result.confidence == pytest.approx(0.8)

    @pytest.mark.asyncio
    async def test_food_handler_rejects_empty(self):
        provider = FakeProvider(text='{"mealType": "lunch", "foods": []}')

        with pytest.raises(AIProviderError):
            await FoodParseHandler(provider).process("nothing", ModelConfig(0.2, 1000))


class TestParseJsonObject:
    def test_strips_code_fence(self):
        assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    def test_rejects_array(self):
        with pytest.raises(AIProviderError):
            parse_json_object("[1, 2]")
