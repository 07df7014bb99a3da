"""Pure rules of the fuel economy: multipliers, rewards, progression and achievements.

Nothing here touches the database. Inputs may be ORM rows or plain dicts.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR

from utils.constants import REQUIREMENT_TYPES


@dataclass
class UserStats:
    points: int = 0
    planets_discovered: int = 0
    challenges_completed: int = 0
    upgrades_owned: int = 0


def _field(item, name, default=None):
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def calculate_points_multiplier(upgrades):
    """
    Product of the multipliers of every equipped upgrade, starting at 1.

    Returned as a Decimal so 1.2 x 1.5 is exactly 1.8; convert with float()
    only for display.
    """
    total = Decimal("1")
    for upgrade in upgrades:
        multiplier = _field(upgrade, "points_multiplier")
        if _field(upgrade, "is_equipped") and multiplier:
            total *= Decimal(str(multiplier))
    return total


def award_points(base_points, multiplier):
    """Apply a multiplier to a base reward, truncating toward the floor."""
    product = Decimal(str(base_points)) * Decimal(str(multiplier))
    return int(product.to_integral_value(rounding=ROUND_FLOOR))


def get_next_planet(discovered_ids, planets):
    """First planet in order_index order that the user has not discovered, or None."""
    discovered = set(discovered_ids)
    for planet in sorted(planets, key=lambda p: _field(p, "order_index")):
        if _field(planet, "id", _field(planet, "planet_id")) not in discovered:
            return planet
    return None


def can_discover_planet(user_points, next_planet):
    if next_planet is None:
        return False
    return user_points >= _field(next_planet, "fuel_required")


def is_upgrade_locked(upgrade, discovered_count):
    return discovered_count < (_field(upgrade, "unlock_requirement") or 0)


def evaluate_achievements(stats, achievements, already_granted):
    """Achievements not yet granted whose requirement the stats now meet."""
    granted = set(already_granted)
    qualifying = []
    for achievement in achievements:
        achievement_id = _field(achievement, "id", _field(achievement, "achievement_id"))
        if achievement_id in granted:
            continue

        stat_name = REQUIREMENT_TYPES.get(_field(achievement, "requirement_type"))
        if stat_name is None:
            continue

        if getattr(stats, stat_name) >= _field(achievement, "requirement_value"):
            qualifying.append(achievement)
    return qualifying
