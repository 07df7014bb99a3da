from app import create_app
from models import (
    db, User, WellnessChallenge, UserCompletion, Planet, SpacecraftUpgrade, SpaceAchievement
)
from utils.constants import PLANET_CATALOG, UPGRADE_CATALOG, ACHIEVEMENT_RULES, SAMPLE_CHALLENGES
from werkzeug.security import generate_password_hash


def seed_catalogs():
    """Insert the planet, upgrade and achievement catalogs."""
    db.session.add_all([Planet(**planet) for planet in PLANET_CATALOG])
    db.session.add_all([SpacecraftUpgrade(**upgrade) for upgrade in UPGRADE_CATALOG])
    db.session.add_all([SpaceAchievement(**rule) for rule in ACHIEVEMENT_RULES.values()])
    db.session.commit()


def seed_sample_data():
    # USERS
    users = [
        User(username="nshgoat", email="user1@example.com", password_hash=generate_password_hash("password123"), points=0),
        User(username="reubaby", email="user2@example.com", password_hash=generate_password_hash("password123"), points=10),
        User(username="6767", email="user3@example.com", password_hash=generate_password_hash("password123"), points=10),
    ]
    db.session.add_all(users)
    db.session.commit()

    # CHALLENGES
    creators = [users[0], users[0], users[1], users[1], users[1], users[2], users[2]]
    challenges = [
        WellnessChallenge(creator_id=creator.id, description=description, points=points)
        for creator, (description, points) in zip(creators, SAMPLE_CHALLENGES)
    ]
    db.session.add_all(challenges)
    db.session.commit()

    # COMPLETIONS
    db.session.add_all([
        UserCompletion(challenge_id=challenges[0].id, user_id=users[1].id, details="Proper rest achieved"),
        UserCompletion(challenge_id=challenges[0].id, user_id=users[2].id, details="Slept well"),
    ])
    db.session.commit()


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        # Drop and recreate all tables
        db.drop_all()
        db.create_all()

        seed_catalogs()
        seed_sample_data()
        print("Database seeded successfully!")
