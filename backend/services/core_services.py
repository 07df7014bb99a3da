import logging
from contextlib import contextmanager

from flask import current_app
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash, check_password_hash

from models import (
    db,
    User,
    WellnessChallenge,
    UserCompletion,
    Planet,
    UserPlanet,
    SpacecraftUpgrade,
    UserUpgrade,
    SpaceAchievement,
    UserAchievement,
)
from services.game_mechanics import (
    UserStats,
    award_points,
    calculate_points_multiplier,
    can_discover_planet,
    evaluate_achievements,
    get_next_planet,
    is_upgrade_locked,
)
from utils.constants import MAX_CHALLENGE_POINTS, UPGRADE_CATEGORIES
from utils.errors import (
    Conflict,
    Forbidden,
    InsufficientFunds,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)


@contextmanager
def transaction():
    """Commit the session on success, roll everything back on any error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def _lock_user(user_id):
    user = db.session.get(User, user_id, with_for_update=True, populate_existing=True)
    if not user:
        raise NotFound("User not found.")
    return user


def _adjust_balance(user, delta, required=0):
    """Atomically add delta to the balance, only while it still covers `required`."""
    result = db.session.execute(
        update(User)
        .where(User.id == user.id, User.points >= required)
        .values(points=User.points + delta)
        .execution_options(synchronize_session=False)
    )
    db.session.refresh(user)
    if result.rowcount == 0:
        raise InsufficientFunds(required=required, current=user.points)
    return user.points


def _flush_or_conflict(message):
    try:
        db.session.flush()
    except IntegrityError as error:
        raise Conflict(message) from error


def _user_upgrades(user_id):
    return (
        UserUpgrade.query.filter_by(user_id=user_id)
        .join(SpacecraftUpgrade)
        .order_by(UserUpgrade.purchased_at.desc())
        .all()
    )


def _discovered_count(user_id):
    return UserPlanet.query.filter_by(user_id=user_id).count()


class AchievementService:
    """Grants space achievements once their requirement is met."""

    @staticmethod
    def get_user_stats(user_id):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFound("User not found.")

        return UserStats(
            points=user.points,
            planets_discovered=_discovered_count(user_id),
            challenges_completed=UserCompletion.query.filter_by(user_id=user_id).count(),
            upgrades_owned=UserUpgrade.query.filter_by(user_id=user_id).count(),
        )

    @staticmethod
    def get_granted_ids(user_id):
        rows = UserAchievement.query.filter_by(user_id=user_id).all()
        return {row.achievement_id for row in rows}

    @staticmethod
    def _grant(user_id, achievement):
        """Insert one grant. A duplicate is a no-op and returns False."""
        try:
            with db.session.begin_nested():
                db.session.add(UserAchievement(user_id=user_id, achievement_id=achievement.id))
        except IntegrityError:
            logger.debug("Achievement %s already granted to user %s", achievement.id, user_id)
            return False
        return True

    @staticmethod
    def check_space_achievements(user_id):
        """
        Evaluate and grant every newly qualifying achievement for a user.

        Bonus points of the grants that actually went in are credited in a
        single balance update. Never raises: this runs after the triggering
        transaction has already committed.
        """
        try:
            stats = AchievementService.get_user_stats(user_id)
            catalog = SpaceAchievement.query.all()
            granted_ids = AchievementService.get_granted_ids(user_id)
        except Exception:
            db.session.rollback()
            logger.exception("Skipping achievement check for user %s", user_id)
            return []

        qualifying = evaluate_achievements(stats, catalog, granted_ids)
        if not qualifying:
            return []

        newly_granted = []
        try:
            for achievement in qualifying:
                if AchievementService._grant(user_id, achievement):
                    newly_granted.append(achievement)

            bonus = sum(achievement.reward_points or 0 for achievement in newly_granted)
            if bonus > 0:
                db.session.execute(
                    update(User)
                    .where(User.id == user_id)
                    .values(points=User.points + bonus)
                    .execution_options(synchronize_session=False)
                )
            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.exception("Error awarding achievements to user %s", user_id)
            return []

        if newly_granted:
            logger.info(
                "User %s earned %s (+%s fuel)",
                user_id,
                ", ".join(a.name for a in newly_granted),
                bonus,
            )
        return newly_granted

    @staticmethod
    def schedule_check(user_id):
        """Fire-and-forget achievement check; inline when no executor is configured."""
        app = current_app._get_current_object()
        executor = app.extensions.get("achievement_executor")
        if executor is None:
            AchievementService.check_space_achievements(user_id)
            return None

        try:
            return executor.submit(_check_in_app_context, app, user_id)
        except RuntimeError:
            logger.exception("Could not schedule achievement check for user %s", user_id)
            return None


def _check_in_app_context(app, user_id):
    with app.app_context():
        return AchievementService.check_space_achievements(user_id)


class EconomyService:
    """The three fuel transactions plus equip toggling."""

    @staticmethod
    def complete_challenge(user_id, challenge_id, details=None):
        with transaction():
            user = _lock_user(user_id)
            challenge = db.session.get(WellnessChallenge, challenge_id)
            if not challenge:
                raise NotFound("Challenge not found.")

            completion = UserCompletion(challenge_id=challenge.id, user_id=user.id, details=details)
            db.session.add(completion)
            db.session.flush()

            multiplier = calculate_points_multiplier(_user_upgrades(user_id))
            reward = award_points(challenge.points, multiplier)
            new_balance = _adjust_balance(user, reward)

            result = completion.to_dict()
            result.update({
                "reward": reward,
                "multiplier": float(multiplier),
                "new_balance": new_balance,
            })

        logger.info("User %s completed challenge %s for %s fuel", user_id, challenge_id, reward)
        AchievementService.schedule_check(user_id)
        return result

    @staticmethod
    def discover_planet(user_id, planet_id):
        with transaction():
            user = _lock_user(user_id)
            if UserPlanet.query.filter_by(user_id=user_id, planet_id=planet_id).first():
                raise Conflict("Planet already discovered!")

            planet = db.session.get(Planet, planet_id)
            if not planet:
                raise NotFound("Planet not found.")

            if user.points < planet.fuel_required:
                raise InsufficientFunds(required=planet.fuel_required, current=user.points)

            db.session.add(UserPlanet(user_id=user.id, planet_id=planet.id))
            _flush_or_conflict("Planet already discovered!")

            multiplier = calculate_points_multiplier(_user_upgrades(user_id))
            reward = award_points(planet.discovery_reward, multiplier)
            # cost and reward land in one balance write
            new_balance = _adjust_balance(user, reward - planet.fuel_required, required=planet.fuel_required)

            result = {
                "message": f"Discovered {planet.name}!",
                "planet": planet.to_dict(),
                "bonus_reward": reward,
                "new_fuel_total": new_balance,
            }

        logger.info("User %s discovered planet %s", user_id, planet_id)
        AchievementService.schedule_check(user_id)
        return result

    @staticmethod
    def purchase_upgrade(user_id, upgrade_id):
        with transaction():
            user = _lock_user(user_id)
            if UserUpgrade.query.filter_by(user_id=user_id, upgrade_id=upgrade_id).first():
                raise Conflict("Upgrade already owned.")

            upgrade = db.session.get(SpacecraftUpgrade, upgrade_id)
            if not upgrade:
                raise NotFound("Upgrade not found.")

            discovered = _discovered_count(user_id)
            if is_upgrade_locked(upgrade, discovered):
                raise Forbidden(
                    "Upgrade locked!",
                    required_planets=upgrade.unlock_requirement,
                    current_planets=discovered,
                )

            if user.points < upgrade.price:
                raise InsufficientFunds(required=upgrade.price, current=user.points)

            remaining = _adjust_balance(user, -upgrade.price, required=upgrade.price)

            db.session.add(UserUpgrade(user_id=user.id, upgrade_id=upgrade.id, is_equipped=True))
            _flush_or_conflict("Upgrade already owned.")

            result = {
                "message": "Upgrade purchased!",
                "upgrade": upgrade.name,
                "cost": upgrade.price,
                "remaining_fuel": remaining,
            }

        logger.info("User %s purchased upgrade %s", user_id, upgrade_id)
        AchievementService.schedule_check(user_id)
        return result

    @staticmethod
    def toggle_upgrade_equipped(user_id, upgrade_id, is_equipped):
        if not isinstance(is_equipped, bool):
            raise ValidationError("is_equipped must be true or false.")

        with transaction():
            result = db.session.execute(
                update(UserUpgrade)
                .where(UserUpgrade.user_id == user_id, UserUpgrade.upgrade_id == upgrade_id)
                .values(is_equipped=is_equipped)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFound("Upgrade not found.")

        return {
            "message": "Upgrade equipped!" if is_equipped else "Upgrade unequipped!",
            "upgrade_id": upgrade_id,
            "is_equipped": is_equipped,
        }


class SpaceService:
    """Read-only views of a user's journey, shop, ship and achievements."""

    @staticmethod
    def get_all_planets():
        return Planet.query.order_by(Planet.order_index.asc()).all()

    @staticmethod
    def get_user_journey(user_id):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFound("User not found.")

        planets = SpaceService.get_all_planets()
        discovered = (
            UserPlanet.query.filter_by(user_id=user_id)
            .join(Planet)
            .order_by(Planet.order_index.asc())
            .all()
        )
        next_planet = get_next_planet([d.planet_id for d in discovered], planets)

        return {
            "user": {"user_id": user.id, "username": user.username, "fuel": user.points},
            "discovered_planets": [
                dict(d.planet.to_dict(), discovered_at=d.discovered_at.isoformat())
                for d in discovered
            ],
            "next_planet": next_planet.to_dict() if next_planet else None,
            "can_discover_next": can_discover_planet(user.points, next_planet),
            "total_planets": len(planets),
            "discovery_progress": f"{len(discovered)}/{len(planets)}",
        }

    @staticmethod
    def get_spacecraft_shop(user_id=None, category=None):
        if category and category not in UPGRADE_CATEGORIES:
            raise ValidationError("Unknown category.", categories=list(UPGRADE_CATEGORIES))

        query = SpacecraftUpgrade.query
        if category:
            query = query.filter_by(category=category)
        upgrades = query.order_by(SpacecraftUpgrade.price.asc()).all()

        if user_id is None:
            return [upgrade.to_dict() for upgrade in upgrades]

        discovered = _discovered_count(user_id)
        owned_ids = {
            row.upgrade_id for row in UserUpgrade.query.filter_by(user_id=user_id).all()
        }
        return [
            dict(
                upgrade.to_dict(),
                is_owned=upgrade.id in owned_ids,
                is_locked=is_upgrade_locked(upgrade, discovered),
                unlock_progress=f"{discovered}/{upgrade.unlock_requirement}",
            )
            for upgrade in upgrades
        ]

    @staticmethod
    def get_user_spacecraft(user_id):
        if not db.session.get(User, user_id):
            raise NotFound("User not found.")

        owned = _user_upgrades(user_id)
        grouped = {category: [] for category in UPGRADE_CATEGORIES}
        for ownership in owned:
            grouped[ownership.upgrade.category].append(ownership.to_dict())

        multiplier = calculate_points_multiplier(owned)
        return {
            "upgrades": grouped,
            "total_upgrades": len(owned),
            "points_multiplier": f"{float(multiplier):.2f}x",
            "equipped_count": sum(1 for ownership in owned if ownership.is_equipped),
        }

    @staticmethod
    def get_user_achievements(user_id):
        if not db.session.get(User, user_id):
            raise NotFound("User not found.")

        earned = {
            row.achievement_id: row.earned_at
            for row in UserAchievement.query.filter_by(user_id=user_id).all()
        }
        catalog = SpaceAchievement.query.order_by(SpaceAchievement.requirement_value.asc()).all()

        achievements = []
        for achievement in catalog:
            earned_at = earned.get(achievement.id)
            achievements.append(dict(
                achievement.to_dict(),
                is_earned=achievement.id in earned,
                earned_at=earned_at.isoformat() if earned_at else None,
            ))

        return {
            "achievements": achievements,
            "earned_count": len(earned),
            "total_count": len(catalog),
            "completion": f"{len(earned)}/{len(catalog)}",
        }


class ChallengeService:
    """Wellness challenges and their completions."""

    @staticmethod
    def _validate(description, points):
        if not description or not str(description).strip():
            raise ValidationError("Description is required.")
        if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
            raise ValidationError("Points must be a positive whole number.")

        cap = current_app.config.get("MAX_CHALLENGE_POINTS", MAX_CHALLENGE_POINTS)
        if points > cap:
            raise ValidationError(f"Points cannot exceed {cap}.", max_points=cap)

    @staticmethod
    def _get_owned(challenge_id, user_id):
        challenge = db.session.get(WellnessChallenge, challenge_id)
        if not challenge:
            raise NotFound("Challenge not found.")
        if challenge.creator_id != user_id:
            raise Forbidden("Forbidden: Not the challenge creator.")
        return challenge

    @staticmethod
    def create_challenge(creator_id, description, points):
        ChallengeService._validate(description, points)
        with transaction():
            challenge = WellnessChallenge(
                creator_id=creator_id,
                description=str(description).strip(),
                points=points,
            )
            db.session.add(challenge)
            db.session.flush()
            result = challenge.to_dict()
        return result

    @staticmethod
    def list_challenges():
        rows = (
            db.session.query(WellnessChallenge, func.count(UserCompletion.id))
            .outerjoin(UserCompletion, UserCompletion.challenge_id == WellnessChallenge.id)
            .group_by(WellnessChallenge.id)
            .order_by(WellnessChallenge.id.asc())
            .all()
        )
        return [
            dict(challenge.to_dict(), total_completions=total)
            for challenge, total in rows
        ]

    @staticmethod
    def update_challenge(challenge_id, user_id, description, points):
        ChallengeService._validate(description, points)
        with transaction():
            challenge = ChallengeService._get_owned(challenge_id, user_id)
            challenge.description = str(description).strip()
            challenge.points = points
            result = challenge.to_dict()
        return result

    @staticmethod
    def delete_challenge(challenge_id, user_id):
        with transaction():
            challenge = ChallengeService._get_owned(challenge_id, user_id)
            UserCompletion.query.filter_by(challenge_id=challenge.id).delete()
            db.session.delete(challenge)

    @staticmethod
    def get_completions(challenge_id):
        completions = UserCompletion.query.filter_by(challenge_id=challenge_id).all()
        if not completions:
            raise NotFound("No attempts found for this challenge.")
        return [{"user_id": c.user_id, "details": c.details} for c in completions]

    @staticmethod
    def get_user_completions(challenge_id, user_id):
        completions = (
            UserCompletion.query.filter_by(challenge_id=challenge_id, user_id=user_id)
            .order_by(UserCompletion.id.desc())
            .all()
        )
        if not completions:
            raise NotFound("No attempts found for this challenge by you.")
        return [{"completion_id": c.id, "details": c.details} for c in completions]


class UserService:

    @staticmethod
    def register(username, password, email=None):
        if not username or not password:
            raise ValidationError("Missing username or password.")
        if len(password) < 8:
            raise ValidationError("Password must be at least 8 characters.")

        try:
            user = User(
                username=username,
                email=email or None,
                password_hash=generate_password_hash(password),
            )
        except ValueError as error:
            raise ValidationError(str(error)) from error

        with transaction():
            db.session.add(user)
            _flush_or_conflict("Username already exists.")
            result = user.to_dict()
        return result

    @staticmethod
    def authenticate(username, password):
        user = User.query.filter_by(username=username).first()
        if not user or not check_password_hash(user.password_hash, password):
            return None
        return user

    @staticmethod
    def get_user(user_id):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFound("User not found.")
        return user.to_dict()

    @staticmethod
    def list_users():
        return [user.to_dict() for user in User.query.order_by(User.id.asc()).all()]

    @staticmethod
    def update_username(user_id, username):
        if not username or len(username) < 3:
            raise ValidationError("Username must be at least 3 characters.")

        with transaction():
            user = db.session.get(User, user_id)
            if not user:
                raise NotFound("User not found.")
            user.username = username
            _flush_or_conflict("Username already exists.")
            result = user.to_dict()
        return result

    @staticmethod
    def get_leaderboard(limit=None):
        query = User.query.order_by(User.points.desc(), User.id.asc())
        if limit:
            query = query.limit(limit)
        return [
            {"rank": rank, "username": user.username, "points": user.points}
            for rank, user in enumerate(query.all(), start=1)
        ]
