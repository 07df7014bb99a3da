from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import validates

from utils.constants import UPGRADE_CATEGORIES, REQUIREMENT_TYPES

db = SQLAlchemy()


# Core Models
class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(255), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    points = db.Column(db.Integer, default=0, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    challenges = db.relationship("WellnessChallenge", back_populates="creator", lazy="dynamic")
    completions = db.relationship("UserCompletion", back_populates="user", lazy="dynamic")
    planets = db.relationship("UserPlanet", back_populates="user", lazy="dynamic")
    upgrades = db.relationship("UserUpgrade", back_populates="user", lazy="dynamic")
    achievements = db.relationship("UserAchievement", back_populates="user", lazy="dynamic")

    #  Methods
    def __repr__(self):
        return f"<User {self.username}>"

    def to_dict(self):
        return {
            "user_id": self.id,
            "username": self.username,
            "email": self.email,
            "points": self.points,
        }

    @validates("email")
    def validate_email(self, key, email):
        if email and "@" not in email:
            raise ValueError("Invalid email format.")
        return email


# Wellness challenges
class WellnessChallenge(db.Model):
    __tablename__ = "wellness_challenge"

    id = db.Column(db.Integer, primary_key=True)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    description = db.Column(db.Text, nullable=False)
    points = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    creator = db.relationship("User", back_populates="challenges")
    completions = db.relationship("UserCompletion", back_populates="challenge", lazy="dynamic", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<WellnessChallenge {self.id} points={self.points}>"

    def to_dict(self):
        return {
            "challenge_id": self.id,
            "creator_id": self.creator_id,
            "description": self.description,
            "points": self.points,
        }


class UserCompletion(db.Model):
    __tablename__ = "user_completion"

    id = db.Column(db.Integer, primary_key=True)
    challenge_id = db.Column(db.Integer, db.ForeignKey("wellness_challenge.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    details = db.Column(db.Text)
    completed_at = db.Column(db.DateTime, default=datetime.utcnow)

    challenge = db.relationship("WellnessChallenge", back_populates="completions")
    user = db.relationship("User", back_populates="completions")

    def __repr__(self):
        return f"<UserCompletion user={self.user_id} challenge={self.challenge_id}>"

    def to_dict(self):
        return {
            "completion_id": self.id,
            "challenge_id": self.challenge_id,
            "user_id": self.user_id,
            "details": self.details,
        }


# Space exploration
class Planet(db.Model):
    __tablename__ = "planet"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    fuel_required = db.Column(db.Integer, nullable=False)
    discovery_reward = db.Column(db.Integer, default=0, nullable=False)
    image_url = db.Column(db.String(255))
    rarity = db.Column(db.String(20), default="common")
    order_index = db.Column(db.Integer, nullable=False, index=True)

    discoveries = db.relationship("UserPlanet", back_populates="planet", lazy="dynamic")

    def __repr__(self):
        return f"<Planet {self.name}>"

    def to_dict(self):
        return {
            "planet_id": self.id,
            "name": self.name,
            "description": self.description,
            "fuel_required": self.fuel_required,
            "discovery_reward": self.discovery_reward,
            "image_url": self.image_url,
            "rarity": self.rarity,
            "order_index": self.order_index,
        }


class UserPlanet(db.Model):
    __tablename__ = "user_planet"
    __table_args__ = (db.UniqueConstraint("user_id", "planet_id", name="unique_user_planet"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    planet_id = db.Column(db.Integer, db.ForeignKey("planet.id"), nullable=False)
    discovered_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship("User", back_populates="planets")
    planet = db.relationship("Planet", back_populates="discoveries")

    def __repr__(self):
        return f"<UserPlanet user={self.user_id} planet={self.planet_id}>"


class SpacecraftUpgrade(db.Model):
    __tablename__ = "spacecraft_upgrade"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.String(50), nullable=False, index=True)
    price = db.Column(db.Integer, nullable=False)
    image_url = db.Column(db.String(255))
    rarity = db.Column(db.String(20), default="common")
    points_multiplier = db.Column(db.Numeric(3, 2, asdecimal=False), default=1.0, nullable=False)
    unlock_requirement = db.Column(db.Integer, default=0, nullable=False)

    owners = db.relationship("UserUpgrade", back_populates="upgrade", lazy="dynamic")

    def __repr__(self):
        return f"<SpacecraftUpgrade {self.name}>"

    @validates("category")
    def validate_category(self, key, category):
        if category not in UPGRADE_CATEGORIES:
            raise ValueError(f"Unknown upgrade category: {category}")
        return category

    @validates("points_multiplier")
    def validate_multiplier(self, key, multiplier):
        if multiplier is not None and multiplier < 1.0:
            raise ValueError("points_multiplier must be at least 1.0")
        return multiplier

    def to_dict(self):
        return {
            "upgrade_id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "image_url": self.image_url,
            "rarity": self.rarity,
            "points_multiplier": self.points_multiplier,
            "unlock_requirement": self.unlock_requirement,
        }


class UserUpgrade(db.Model):
    __tablename__ = "user_upgrade"
    __table_args__ = (db.UniqueConstraint("user_id", "upgrade_id", name="unique_user_upgrade"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    upgrade_id = db.Column(db.Integer, db.ForeignKey("spacecraft_upgrade.id"), nullable=False)
    purchased_at = db.Column(db.DateTime, default=datetime.utcnow)
    is_equipped = db.Column(db.Boolean, default=True, nullable=False)

    user = db.relationship("User", back_populates="upgrades")
    upgrade = db.relationship("SpacecraftUpgrade", back_populates="owners")

    def __repr__(self):
        return f"<UserUpgrade user={self.user_id} upgrade={self.upgrade_id} equipped={self.is_equipped}>"

    @property
    def points_multiplier(self):
        return self.upgrade.points_multiplier if self.upgrade else None

    def to_dict(self):
        data = self.upgrade.to_dict() if self.upgrade else {"upgrade_id": self.upgrade_id}
        data.update({
            "is_equipped": self.is_equipped,
            "purchased_at": self.purchased_at.isoformat() if self.purchased_at else None,
        })
        return data


# Achievements
class SpaceAchievement(db.Model):
    __tablename__ = "space_achievement"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    icon = db.Column(db.String(100))
    requirement_type = db.Column(db.String(50), nullable=False)
    requirement_value = db.Column(db.Integer, nullable=False)
    reward_points = db.Column(db.Integer, default=0, nullable=False)

    grants = db.relationship("UserAchievement", back_populates="achievement", lazy="dynamic")

    def __repr__(self):
        return f"<SpaceAchievement {self.name}>"

    @validates("requirement_type")
    def validate_requirement_type(self, key, requirement_type):
        if requirement_type not in REQUIREMENT_TYPES:
            raise ValueError(f"Unknown requirement type: {requirement_type}")
        return requirement_type

    def to_dict(self):
        return {
            "achievement_id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "requirement_type": self.requirement_type,
            "requirement_value": self.requirement_value,
            "reward_points": self.reward_points,
        }


class UserAchievement(db.Model):
    __tablename__ = "user_achievement"
    __table_args__ = (db.UniqueConstraint("user_id", "achievement_id", name="unique_user_achievement"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    achievement_id = db.Column(db.Integer, db.ForeignKey("space_achievement.id"), nullable=False)
    earned_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship("User", back_populates="achievements")
    achievement = db.relationship("SpaceAchievement", back_populates="grants")

    def __repr__(self):
        return f"<UserAchievement user={self.user_id} achievement={self.achievement_id}>"
