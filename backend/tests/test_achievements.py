import pytest

from models import db, UserAchievement
from services.core_services import AchievementService, EconomyService


class RecordingExecutor:
    """Collects submitted work instead of running it."""

    def __init__(self):
        self.submitted = []

    def submit(self, fn, *args):
        self.submitted.append((fn, args))

    def run_all(self):
        return [fn(*args) for fn, args in self.submitted]


def granted_names(user_id):
    rows = UserAchievement.query.filter_by(user_id=user_id).all()
    return sorted(row.achievement.name for row in rows)


class TestCheckSpaceAchievements:

    def test_grants_and_credits_bonus_once(self, make_user, give_planets, catalog, balance):
        user_id = make_user()
        planets = catalog["planet"]
        give_planets(user_id, planets["Yavin IV"], planets["Tatooine"], planets["Hoth"])

        first = AchievementService.check_space_achievements(user_id)
        second = AchievementService.check_space_achievements(user_id)

        assert sorted(a.name for a in first) == ["Explorer", "First Launch"]
        assert second == []
        assert granted_names(user_id) == ["Explorer", "First Launch"]
        assert balance(user_id) == 60

    def test_no_qualifying_achievements_leaves_balance(self, make_user, balance):
        user_id = make_user(points=99)

        assert AchievementService.check_space_achievements(user_id) == []
        assert balance(user_id) == 99

    def test_points_requirement(self, make_user, balance):
        user_id = make_user(points=100)

        granted = AchievementService.check_space_achievements(user_id)

        assert [a.name for a in granted] == ["Fuel Collector"]
        assert balance(user_id) == 125

    def test_duplicate_grant_is_skipped_without_blocking_others(
        self, make_user, give_planets, catalog, balance, monkeypatch
    ):
        user_id = make_user()
        planets = catalog["planet"]
        give_planets(user_id, planets["Yavin IV"], planets["Tatooine"], planets["Hoth"])
        db.session.add(UserAchievement(user_id=user_id, achievement_id=catalog["achievement"]["First Launch"]))
        db.session.commit()
        # a stale view of the grants, as a concurrent evaluation would see it
        monkeypatch.setattr(AchievementService, "get_granted_ids", staticmethod(lambda uid: set()))

        granted = AchievementService.check_space_achievements(user_id)

        assert [a.name for a in granted] == ["Explorer"]
        assert granted_names(user_id) == ["Explorer", "First Launch"]
        assert balance(user_id) == 50

    def test_unknown_user_is_abandoned_silently(self, app):
        assert AchievementService.check_space_achievements(424242) == []

    def test_stat_failure_is_swallowed(self, make_user, balance, monkeypatch):
        user_id = make_user(points=500)

        def broken(uid):
            raise RuntimeError("stats unavailable")

        monkeypatch.setattr(AchievementService, "get_user_stats", staticmethod(broken))

        assert AchievementService.check_space_achievements(user_id) == []
        assert balance(user_id) == 500


class TestTriggeredByTransactions:

    def test_discovery_triggers_evaluation_after_commit(self, make_user, catalog, balance):
        user_id = make_user(points=100)

        result = EconomyService.discover_planet(user_id, catalog["planet"]["Tatooine"])

        # the response reports the transaction only; First Launch adds 10 afterwards
        assert result["new_fuel_total"] == 70
        assert granted_names(user_id) == ["First Launch"]
        assert balance(user_id) == 80

    def test_challenge_completion_counts_toward_achievements(self, make_user, make_challenge, balance):
        user_id = make_user(points=90)

        EconomyService.complete_challenge(user_id, make_challenge(points=10), "done")

        assert granted_names(user_id) == ["Fuel Collector"]
        assert balance(user_id) == 125

    def test_async_check_does_not_run_inside_transaction(self, app, make_user, catalog, balance):
        executor = RecordingExecutor()
        app.extensions["achievement_executor"] = executor
        user_id = make_user(points=100)

        result = EconomyService.discover_planet(user_id, catalog["planet"]["Tatooine"])

        assert result["new_fuel_total"] == 70
        assert balance(user_id) == 70
        assert len(executor.submitted) == 1

        # in-memory sqlite shares one connection; release it for the worker's session
        db.session.close()
        executor.run_all()
        assert granted_names(user_id) == ["First Launch"]
        assert balance(user_id) == 80

    def test_scheduling_failure_does_not_fail_transaction(self, app, make_user, catalog, balance):
        class ShutDownExecutor:
            def submit(self, fn, *args):
                raise RuntimeError("cannot schedule new futures after shutdown")

        app.extensions["achievement_executor"] = ShutDownExecutor()
        user_id = make_user(points=100)

        result = EconomyService.discover_planet(user_id, catalog["planet"]["Tatooine"])

        assert result["new_fuel_total"] == 70
        assert balance(user_id) == 70

    @pytest.mark.usefixtures("without_achievements")
    def test_empty_catalog(self, make_user, catalog, balance):
        user_id = make_user(points=100)

        EconomyService.discover_planet(user_id, catalog["planet"]["Tatooine"])

        assert granted_names(user_id) == []
        assert balance(user_id) == 70
