MAX_CHALLENGE_POINTS = 50

UPGRADE_CATEGORIES = ("engine", "hull", "cosmetic", "special")

# requirement_type -> UserStats attribute
REQUIREMENT_TYPES = {
    "planets": "planets_discovered",
    "points": "points",
    "challenges": "challenges_completed",
    "upgrades": "upgrades_owned",
}

PLANET_CATALOG = [
    {"name": "Yavin IV", "description": "Rebel base hidden among jungle ruins", "fuel_required": 0, "discovery_reward": 0, "rarity": "common", "order_index": 1},
    {"name": "Tatooine", "description": "A harsh desert world", "fuel_required": 50, "discovery_reward": 20, "rarity": "common", "order_index": 2},
    {"name": "Hoth", "description": "Frozen battlefield", "fuel_required": 100, "discovery_reward": 20, "rarity": "common", "order_index": 3},
    {"name": "Naboo", "description": "Peaceful planet", "fuel_required": 200, "discovery_reward": 50, "rarity": "rare", "order_index": 4},
    {"name": "Dagobah", "description": "Mysterious swamp world", "fuel_required": 350, "discovery_reward": 50, "rarity": "rare", "order_index": 5},
    {"name": "Mustafar", "description": "Volcanic planet", "fuel_required": 500, "discovery_reward": 100, "rarity": "epic", "order_index": 6},
    {"name": "Kamino", "description": "Ocean planet", "fuel_required": 750, "discovery_reward": 100, "rarity": "epic", "order_index": 7},
    {"name": "Coruscant", "description": "Galactic capital", "fuel_required": 1000, "discovery_reward": 350, "rarity": "legendary", "order_index": 8},
    {"name": "Exegol", "description": "Hidden Sith world", "fuel_required": 1500, "discovery_reward": 350, "rarity": "legendary", "order_index": 9},
    {"name": "Death Star", "description": "Ultimate weapon", "fuel_required": 2500, "discovery_reward": 500, "rarity": "mythic", "order_index": 10},
]

UPGRADE_CATALOG = [
    {"name": "Ion Engine", "description": "Improves fuel efficiency for short-range travel", "category": "engine", "price": 50, "image_url": "ion_engine.png", "rarity": "common", "points_multiplier": 1.10, "unlock_requirement": 1},
    {"name": "Warp Drive", "description": "Allows faster interplanetary travel", "category": "engine", "price": 200, "image_url": "warp_drive.png", "rarity": "rare", "points_multiplier": 1.30, "unlock_requirement": 3},
    {"name": "Hyperdrive Core", "description": "Top-tier engine used by elite explorers", "category": "engine", "price": 500, "image_url": "hyperdrive.png", "rarity": "epic", "points_multiplier": 1.60, "unlock_requirement": 6},
    {"name": "Reinforced Hull", "description": "Strengthened hull plating", "category": "hull", "price": 100, "image_url": "reinforced_hull.png", "rarity": "common", "points_multiplier": 1.05, "unlock_requirement": 2},
    {"name": "Titanium Hull", "description": "Advanced hull material", "category": "hull", "price": 300, "image_url": "titanium_hull.png", "rarity": "rare", "points_multiplier": 1.20, "unlock_requirement": 4},
    {"name": "Neutronium Armor", "description": "Near-indestructible hull technology", "category": "hull", "price": 800, "image_url": "neutronium_armor.png", "rarity": "legendary", "points_multiplier": 1.50, "unlock_requirement": 7},
    {"name": "Golden Paint", "description": "Luxury cosmetic finish", "category": "cosmetic", "price": 25, "image_url": "gold_paint.png", "rarity": "common", "points_multiplier": 1.00, "unlock_requirement": 0},
    {"name": "Nebula Glow", "description": "Cosmic visual trail effect", "category": "cosmetic", "price": 75, "image_url": "nebula_glow.png", "rarity": "rare", "points_multiplier": 1.00, "unlock_requirement": 1},
    {"name": "Auto-Navigation AI", "description": "Optimises travel routes automatically", "category": "special", "price": 400, "image_url": "auto_nav_ai.png", "rarity": "epic", "points_multiplier": 1.40, "unlock_requirement": 5},
    {"name": "Quantum Scanner", "description": "Reveals hidden planetary bonuses", "category": "special", "price": 650, "image_url": "quantum_scanner.png", "rarity": "legendary", "points_multiplier": 1.55, "unlock_requirement": 8},
]

ACHIEVEMENT_RULES = {
    "first_launch": {
        "name": "First Launch",
        "description": "Begin your journey",
        "icon": "🚀",
        "requirement_type": "planets",
        "requirement_value": 1,
        "reward_points": 10,
    },
    "explorer": {
        "name": "Explorer",
        "description": "Discover 3 planets",
        "icon": "🌍",
        "requirement_type": "planets",
        "requirement_value": 3,
        "reward_points": 50,
    },
    "star_voyager": {
        "name": "Star Voyager",
        "description": "Discover 5 planets",
        "icon": "⭐",
        "requirement_type": "planets",
        "requirement_value": 5,
        "reward_points": 100,
    },
    "cosmic_pioneer": {
        "name": "Cosmic Pioneer",
        "description": "Discover all planets",
        "icon": "🌌",
        "requirement_type": "planets",
        "requirement_value": 10,
        "reward_points": 500,
    },
    "fuel_collector": {
        "name": "Fuel Collector",
        "description": "Earn 100 points",
        "icon": "⛽",
        "requirement_type": "points",
        "requirement_value": 100,
        "reward_points": 25,
    },
    "point_master": {
        "name": "Point Master",
        "description": "Earn 500 points",
        "icon": "💯",
        "requirement_type": "points",
        "requirement_value": 500,
        "reward_points": 100,
    },
    "legendary_explorer": {
        "name": "Legendary Explorer",
        "description": "Earn 1000 points",
        "icon": "👑",
        "requirement_type": "points",
        "requirement_value": 1000,
        "reward_points": 250,
    },
    "challenge_champion": {
        "name": "Challenge Champion",
        "description": "Complete 10 challenges",
        "icon": "🏆",
        "requirement_type": "challenges",
        "requirement_value": 10,
        "reward_points": 75,
    },
    "wellness_warrior": {
        "name": "Wellness Warrior",
        "description": "Complete 25 challenges",
        "icon": "⚔️",
        "requirement_type": "challenges",
        "requirement_value": 25,
        "reward_points": 150,
    },
    "ship_collector": {
        "name": "Ship Collector",
        "description": "Own 5 upgrades",
        "icon": "🛸",
        "requirement_type": "upgrades",
        "requirement_value": 5,
        "reward_points": 100,
    },
    "fleet_admiral": {
        "name": "Fleet Admiral",
        "description": "Own 10 upgrades",
        "icon": "⭐",
        "requirement_type": "upgrades",
        "requirement_value": 10,
        "reward_points": 200,
    },
}

SAMPLE_CHALLENGES = [
    ("Sleep like a boss – Get 7+ hours of sleep", 10),
    ("Stairs over elevator? Respect. – Take the stairs today", 20),
    ("Digital detox – No phone for 1 hour", 10),
    ("Take a 15-minute walk outside", 10),
    ("Talk to a friend face-to-face", 20),
    ("Clean your desk or room", 20),
    ("Help someone without being asked", 20),
]
