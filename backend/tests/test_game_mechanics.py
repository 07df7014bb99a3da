from decimal import Decimal

import pytest

from services.game_mechanics import (
    UserStats,
    award_points,
    calculate_points_multiplier,
    can_discover_planet,
    evaluate_achievements,
    get_next_planet,
    is_upgrade_locked,
)


def equipped(*multipliers):
    return [{"is_equipped": True, "points_multiplier": m} for m in multipliers]


def make_planets(count=10):
    return [
        {"planet_id": i, "name": f"P{i}", "order_index": i, "fuel_required": i * 50}
        for i in range(1, count + 1)
    ]


class TestPointsMultiplier:

    def test_product_of_equipped_multipliers(self):
        multiplier = calculate_points_multiplier(equipped(1.1, 1.3))

        assert multiplier == Decimal("1.43")
        assert float(multiplier) == 1.43

    def test_product_free_of_float_drift(self):
        # 1.2 * 1.5 in binary floats is 1.7999999999999998
        assert calculate_points_multiplier(equipped(1.2, 1.5)) == Decimal("1.8")

    def test_order_does_not_matter(self):
        forward = calculate_points_multiplier(equipped(1.1, 1.3, 1.6))
        backward = calculate_points_multiplier(equipped(1.6, 1.3, 1.1))
        assert forward == backward == Decimal("2.288")

    def test_empty_is_identity(self):
        assert calculate_points_multiplier([]) == 1

    def test_unequipped_and_missing_multipliers_are_skipped(self):
        upgrades = equipped(1.5) + [
            {"is_equipped": False, "points_multiplier": 2.0},
            {"is_equipped": True, "points_multiplier": None},
            {"is_equipped": True},
        ]
        assert calculate_points_multiplier(upgrades) == Decimal("1.5")


class TestAwardPoints:

    def test_applies_multiplier(self):
        assert award_points(100, 1.43) == 143

    def test_truncates_fractional_product(self):
        assert award_points(10, 1.15) == 11
        assert award_points(20, 1.05) == 21
        assert award_points(10, 1.99) == 19

    @pytest.mark.parametrize("base", [0, 1, 7, 50, 999])
    def test_identity_multiplier(self, base):
        assert award_points(base, 1.0) == base

    def test_with_computed_multiplier(self):
        assert award_points(100, calculate_points_multiplier(equipped(1.1, 1.3))) == 143

    @pytest.mark.parametrize("base, expected", [(10, 18), (100, 180), (50, 90)])
    def test_hull_pair_does_not_lose_a_point(self, base, expected):
        assert award_points(base, calculate_points_multiplier(equipped(1.2, 1.5))) == expected

    def test_never_below_base(self):
        assert award_points(29, 1.01) >= 29


class TestProgressionGate:

    def test_next_planet_skips_discovered(self):
        planets = make_planets()
        assert get_next_planet({1, 2}, planets)["name"] == "P3"

    def test_none_when_all_charted(self):
        planets = make_planets()
        assert get_next_planet({p["planet_id"] for p in planets}, planets) is None

    def test_follows_order_index_not_cost(self):
        planets = [
            {"planet_id": 1, "order_index": 2, "fuel_required": 10},
            {"planet_id": 2, "order_index": 1, "fuel_required": 500},
        ]
        assert get_next_planet(set(), planets)["planet_id"] == 2

    def test_gaps_in_discovery(self):
        assert get_next_planet({1, 3}, make_planets())["name"] == "P2"

    def test_can_discover(self):
        planet = {"planet_id": 1, "order_index": 1, "fuel_required": 50}
        assert can_discover_planet(50, planet)
        assert not can_discover_planet(49, planet)
        assert not can_discover_planet(10_000, None)

    def test_upgrade_lock(self):
        upgrade = {"unlock_requirement": 3}
        assert is_upgrade_locked(upgrade, 2)
        assert not is_upgrade_locked(upgrade, 3)
        assert not is_upgrade_locked({"unlock_requirement": 0}, 0)


class TestEvaluateAchievements:

    catalog = [
        {"achievement_id": 1, "requirement_type": "planets", "requirement_value": 1},
        {"achievement_id": 2, "requirement_type": "planets", "requirement_value": 3},
        {"achievement_id": 3, "requirement_type": "points", "requirement_value": 100},
        {"achievement_id": 4, "requirement_type": "challenges", "requirement_value": 10},
        {"achievement_id": 5, "requirement_type": "upgrades", "requirement_value": 5},
        {"achievement_id": 6, "requirement_type": "streak", "requirement_value": 0},
    ]

    def ids(self, achievements):
        return sorted(a["achievement_id"] for a in achievements)

    def test_threshold_is_inclusive(self):
        stats = UserStats(points=100, planets_discovered=3, challenges_completed=10, upgrades_owned=5)
        assert self.ids(evaluate_achievements(stats, self.catalog, set())) == [1, 2, 3, 4, 5]

    def test_below_threshold(self):
        stats = UserStats(points=99, planets_discovered=2, challenges_completed=9, upgrades_owned=4)
        assert self.ids(evaluate_achievements(stats, self.catalog, set())) == [1]

    def test_already_granted_are_skipped(self):
        stats = UserStats(points=500, planets_discovered=3)
        assert self.ids(evaluate_achievements(stats, self.catalog, {1, 3})) == [2]

    def test_nothing_qualifies(self):
        assert evaluate_achievements(UserStats(), self.catalog, set()) == []
