"""Unit tests for focus scoring, weeks, leaderboard and leagues."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import ForbiddenException
from sharp.pipelines import focus as pipelines
from sharp.services.focus.focus_service import calculate_points, summarize_week
from sharp.services.focus.leaderboard_service import LeaderboardService, assign_ranks, display_name
from sharp.services.focus.league_service import LeagueService
from sharp.services.focus.weeks import week_end, week_number, week_start


def _session(start, minutes):
    return {"startTime": start, "endTime": start + timedelta(minutes=minutes), "durationSeconds": minutes * 60}


# ─────────────────────────────────────────────────────────────────
# Points and weeks
# ─────────────────────────────────────────────────────────────────


class TestPoints:
    def test_formula(self):
        # 90 minutes + 2 days * 50 + 3 sessions * 10
        assert calculate_points(90, 2, 3) == 220

    def test_fractional_minutes_floored(self):
        assert calculate_points(10.9, 0, 0) == 10

    def test_summarize_week(self, now):
        sessions = [
            _session(now, 25),
            _session(now + timedelta(hours=2), 50),
            _session(now + timedelta(days=1), 45),
        ]

        summary = summarize_week(sessions)

        assert summary == {
            "totalMinutes": 120,
            "totalSessions": 3,
            "streakDays": 2,
            "points": 120 + 2 * 50 + 3 * 10,
        }


class TestWeeks:
    def test_week_starts_sunday_midnight(self, now):
        # 2026-03-11 is a Wednesday
        assert week_start(now) == datetime(2026, 3, 8, tzinfo=timezone.utc)

    def test_sunday_is_its_own_week_start(self):
        sunday = datetime(2026, 3, 8, 23, 0, tzinfo=timezone.utc)
        assert week_start(sunday) == datetime(2026, 3, 8, tzinfo=timezone.utc)

    def test_week_end_is_saturday(self, now):
        assert week_end(week_start(now)).weekday() == 5

    def test_naive_datetime_treated_as_utc(self):
        assert week_start(datetime(2026, 3, 11, 12)) == datetime(2026, 3, 8, tzinfo=timezone.utc)

    def test_week_number_counts_from_epoch_sunday(self):
        assert week_number(datetime(1970, 1, 4, tzinfo=timezone.utc)) == 0
        assert week_number(datetime(1970, 1, 11, tzinfo=timezone.utc)) == 1

    def test_week_number_does_not_repeat_across_years(self):
        first = week_number(datetime(2025, 1, 8, tzinfo=timezone.utc))
        second = week_number(datetime(2026, 1, 7, tzinfo=timezone.utc))
        assert second - first == 52


# ─────────────────────────────────────────────────────────────────
# Leaderboard
# ─────────────────────────────────────────────────────────────────


class TestLeaderboard:
    def test_ranks_points_then_minutes_then_streak(self):
        scores = [
            {"userId": "a", "points": 100, "totalMinutes": 40, "streakDays": 1},
            {"userId": "b", "points": 150, "totalMinutes": 10, "streakDays": 1},
            {"userId": "c", "points": 100, "totalMinutes": 40, "streakDays": 3},
            {"userId": "d", "points": 100, "totalMinutes": 60, "streakDays": 0},
        ]

        ranked = assign_ranks(scores)

        assert [s["userId"] for s in ranked] == ["b", "d", "c", "a"]
        assert [s["rank"] for s in ranked] == [1, 2, 3, 4]

    def test_display_name_falls_back_to_email(self):
        assert display_name({"name": "", "email": "maria@example.com"}) == "maria"
        assert display_name(None) == "Student"

    @pytest.mark.asyncio
    async def test_persists_ranks_and_names_users(self, mock_db, mock_collection, make_cursor, now):
        alice, bob = ObjectId(), ObjectId()
        scores = [
            {"_id": ObjectId(), "userId": bob, "points": 80, "totalMinutes": 30, "streakDays": 1},
            {"_id": ObjectId(), "userId": alice, "points": 120, "totalMinutes": 20, "streakDays": 2},
        ]
        users = [{"_id": alice, "name": "Alice"}, {"_id": bob, "email": "bob@example.com"}]
        mock_collection.find = MagicMock(side_effect=[make_cursor(scores), make_cursor(users)])

        entries = await LeaderboardService(mock_db, size=50).get_leaderboard(moment=now)

        query = mock_collection.find.call_args_list[0][0][0]
        assert query == {"weekStart": week_start(now)}
        assert [(e["userName"], e["rank"]) for e in entries] == [("Alice", 1), ("bob", 2)]
        mock_collection.bulk_write.assert_called_once()
        assert len(mock_collection.bulk_write.call_args[0][0]) == 2

    @pytest.mark.asyncio
    async def test_group_board_keeps_global_rank(self, mock_db, mock_collection, make_cursor, now):
        scores = [{"_id": ObjectId(), "userId": ObjectId(), "points": 40, "groupId": "team-1"}]
        mock_collection.find = MagicMock(side_effect=[make_cursor(scores), make_cursor([])])

        entries = await LeaderboardService(mock_db).get_leaderboard(group_id="team-1", moment=now)

        query = mock_collection.find.call_args_list[0][0][0]
        assert query == {"weekStart": week_start(now), "groupId": "team-1"}
        assert entries[0]["rank"] == 1
        mock_collection.bulk_write.assert_not_called()

    @pytest.mark.asyncio
    async def test_foreign_group_forbidden(self, make_user):
        leaderboard_service = MagicMock()
        leaderboard_service.get_leaderboard = AsyncMock(return_value=[])

        with pytest.raises(ForbiddenException) as exc_info:
            await pipelines.leaderboard_pipeline(leaderboard_service, make_user(), group_id="team-rivals")

        assert exc_info.value.code == "GROUP_ACCESS_DENIED"
        leaderboard_service.get_leaderboard.assert_not_called()

    @pytest.mark.asyncio
    async def test_own_group_allowed(self, make_user, sample_team_id):
        user = make_user()
        leaderboard_service = MagicMock()
        leaderboard_service.get_leaderboard = AsyncMock(return_value=[
            {"userId": str(user["_id"]), "points": 10, "rank": 1},
        ])

        result = await pipelines.leaderboard_pipeline(leaderboard_service, user, group_id=sample_team_id)

        assert leaderboard_service.get_leaderboard.call_args[1]["group_id"] == sample_team_id
        assert result["currentUser"]["rank"] == 1

    @pytest.mark.asyncio
    async def test_empty_week(self, mock_db, mock_collection):
        assert await LeaderboardService(mock_db).get_leaderboard() == []
        mock_collection.bulk_write.assert_not_called()


# ─────────────────────────────────────────────────────────────────
# Leagues
# ─────────────────────────────────────────────────────────────────


class TestLeagues:
    @pytest.mark.asyncio
    async def test_existing_membership(self, mock_db, mock_collection, make_cursor, sample_user_id):
        league = {"_id": ObjectId(), "name": "Study Squad 1"}
        other = ObjectId()
        mock_collection.find_one = AsyncMock(side_effect=[
            {"leagueId": league["_id"], "userId": ObjectId(sample_user_id)},
            league,
        ])
        mock_collection.find = MagicMock(return_value=make_cursor([
            {"userId": other, "points": 300, "focusMinutes": 200, "streak": 4},
            {"userId": ObjectId(sample_user_id), "points": 120, "focusMinutes": 90, "streak": 2},
        ]))

        result = await LeagueService(mock_db).get_current_league(sample_user_id)

        assert result["league"] is league
        assert [m["rank"] for m in result["members"]] == [1, 2]
        assert result["userRank"] == 2
        mock_collection.insert_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_joins_open_league(self, mock_db, mock_collection, make_cursor, sample_user_id, now):
        open_league = {"_id": ObjectId(), "weekNumber": week_number(now), "maxSize": 8}
        mock_collection.find_one = AsyncMock(return_value=None)
        mock_collection.find = MagicMock(side_effect=[
            make_cursor([open_league]),
            make_cursor([{"userId": ObjectId(sample_user_id), "points": 0}]),
        ])
        mock_collection.count_documents = AsyncMock(return_value=5)

        result = await LeagueService(mock_db).get_current_league(sample_user_id, moment=now)

        assert result["league"] is open_league
        membership = mock_collection.insert_one.call_args[0][0]
        assert membership["leagueId"] == open_league["_id"]
        assert membership["weekNumber"] == week_number(now)
        assert result["userRank"] == 1

    @pytest.mark.asyncio
    async def test_join_after_scoring_keeps_weekly_points(
        self, mock_db, mock_collection, make_cursor, sample_user_id, now,
    ):
        open_league = {"_id": ObjectId(), "weekNumber": week_number(now), "maxSize": 8}
        score = {"userId": ObjectId(sample_user_id), "points": 500, "totalMinutes": 320, "streakDays": 3}
        mock_collection.find_one = AsyncMock(side_effect=[None, score])
        mock_collection.find = MagicMock(side_effect=[make_cursor([open_league]), make_cursor([])])
        mock_collection.count_documents = AsyncMock(return_value=2)

        await LeagueService(mock_db).get_current_league(sample_user_id, moment=now)

        score_query = mock_collection.find_one.call_args_list[1][0][0]
        assert score_query == {"userId": ObjectId(sample_user_id), "weekStart": week_start(now)}
        membership = mock_collection.insert_one.call_args[0][0]
        assert membership["points"] == 500
        assert membership["focusMinutes"] == 320
        assert membership["streak"] == 3

    @pytest.mark.asyncio
    async def test_full_leagues_open_a_new_one(self, mock_db, mock_collection, make_cursor, sample_user_id, now):
        full_league = {"_id": ObjectId(), "weekNumber": week_number(now), "maxSize": 8}
        mock_collection.find_one = AsyncMock(return_value=None)
        mock_collection.find = MagicMock(side_effect=[
            make_cursor([full_league]),
            make_cursor([]),
        ])
        # Members of the full league, then leagues already opened this week
        mock_collection.count_documents = AsyncMock(side_effect=[8, 1])
        mock_collection.insert_one.return_value.inserted_id = ObjectId()

        result = await LeagueService(mock_db, max_size=8).get_current_league(sample_user_id, moment=now)

        league = mock_collection.insert_one.call_args_list[0][0][0]
        assert league["name"] == "Study Squad 2"
        assert league["startDate"] == week_start(now)
        assert league["maxSize"] == 8
        assert result["league"]["name"] == "Study Squad 2"

    @pytest.mark.asyncio
    async def test_concurrent_join_uses_existing_membership(
        self, mock_db, mock_collection, make_cursor, sample_user_id, now,
    ):
        open_league = {"_id": ObjectId(), "maxSize": 8}
        winner = {"_id": ObjectId(), "name": "Study Squad 1"}
        # Membership, weekly score, then the membership that won the race
        mock_collection.find_one = AsyncMock(side_effect=[
            None,
            None,
            {"leagueId": winner["_id"]},
            winner,
        ])
        mock_collection.find = MagicMock(side_effect=[make_cursor([open_league]), make_cursor([])])
        mock_collection.count_documents = AsyncMock(return_value=0)
        mock_collection.insert_one = AsyncMock(side_effect=DuplicateKeyError("dup"))

        result = await LeagueService(mock_db).get_current_league(sample_user_id, moment=now)

        assert result["league"] is winner

    @pytest.mark.asyncio
    async def test_record_focus_minutes_copies_score(self, mock_db, mock_collection, sample_user_id):
        mock_collection.update_one.return_value.matched_count = 1

        updated = await LeagueService(mock_db).record_focus_minutes(
            sample_user_id, 2937, {"points": 220, "totalMinutes": 90, "streakDays": 2}
        )

        assert updated is True
        filter_, update = mock_collection.update_one.call_args[0]
        assert filter_ == {"userId": ObjectId(sample_user_id), "weekNumber": 2937}
        assert update["$set"]["points"] == 220
        assert update["$set"]["focusMinutes"] == 90
        assert update["$set"]["streak"] == 2


# ─────────────────────────────────────────────────────────────────
# save_focus_session_pipeline
# ─────────────────────────────────────────────────────────────────


class TestSaveFocusSession:
    @pytest.fixture
    def focus_service(self):
        service = MagicMock()
        service.save_session = AsyncMock(side_effect=lambda user_id, data: {"_id": ObjectId(), **data})
        service.update_weekly_score = AsyncMock(return_value={"_id": ObjectId(), "points": 75, "totalMinutes": 25})
        return service

    @pytest.fixture
    def league_service(self):
        service = MagicMock()
        service.record_focus_minutes = AsyncMock(return_value=True)
        return service

    @pytest.mark.asyncio
    async def test_heartbeat_does_not_score(self, focus_service, league_service, make_user, now):
        result = await pipelines.save_focus_session_pipeline(
            focus_service, league_service, make_user(), {"startTime": now, "durationSeconds": 60}
        )

        assert result["weeklyScore"] is None
        focus_service.update_weekly_score.assert_not_called()

    @pytest.mark.asyncio
    async def test_final_session_scores_and_updates_league(self, focus_service, league_service, make_user, now):
        user = make_user()
        data = {"startTime": now, "endTime": now + timedelta(minutes=25), "durationSeconds": 1500, "final": True}

        result = await pipelines.save_focus_session_pipeline(focus_service, league_service, user, data)

        assert result["weeklyScore"]["points"] == 75
        focus_service.update_weekly_score.assert_called_once_with(
            str(user["_id"]), now, group_id=user["teamId"]
        )
        league_service.record_focus_minutes.assert_called_once()
        assert league_service.record_focus_minutes.call_args[0][1] == week_number(now)

    @pytest.mark.asyncio
    async def test_tracking_disabled(self, focus_service, league_service, make_user, now):
        user = make_user(focusTrackingEnabled=False)

        with pytest.raises(ForbiddenException) as exc_info:
            await pipelines.save_focus_session_pipeline(focus_service, league_service, user, {"startTime": now})

        assert exc_info.value.code == "FOCUS_TRACKING_DISABLED"
        focus_service.save_session.assert_not_called()


@pytest.mark.asyncio
async def test_export_writes_csv(now):
    focus_service = MagicMock()
    focus_service.list_sessions = AsyncMock(return_value=[
        {"startTime": now, "endTime": now + timedelta(minutes=25), "durationSeconds": 1500,
         "category": "math", "productiveScore": 0.9, "idleEvents": 1, "final": True},
    ])

    content = await pipelines.export_focus_sessions_pipeline(focus_service, str(ObjectId()))

    lines = content.strip().splitlines()
    assert lines[0].startswith("startTime,endTime")
    assert "2026-03-11T15:30:00+00:00" in lines[1]
    assert "math" in lines[1]
