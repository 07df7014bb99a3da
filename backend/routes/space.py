from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from services.core_services import EconomyService, SpaceService
from utils.request_guards import current_user_id, require_fields

space_bp = Blueprint('space_bp', __name__)


# GET a user's journey through the planets
@space_bp.route('/journey/<int:user_id>', methods=['GET'])
@jwt_required()
def get_user_journey(user_id):
    return jsonify(SpaceService.get_user_journey(user_id)), 200


# discover the given planet with the caller's fuel
@space_bp.route('/discover', methods=['POST'])
@jwt_required()
@require_fields("planet_id")
def discover_planet():
    data = request.get_json()
    result = EconomyService.discover_planet(current_user_id(), data["planet_id"])
    return jsonify(result), 201


# browse the spacecraft shop
@space_bp.route('/shop', methods=['GET'])
@jwt_required()
def get_spacecraft_shop():
    category = request.args.get('category')
    return jsonify(SpaceService.get_spacecraft_shop(current_user_id(), category)), 200


# buy an upgrade
@space_bp.route('/shop/purchase', methods=['POST'])
@jwt_required()
@require_fields("upgrade_id")
def purchase_upgrade():
    data = request.get_json()
    result = EconomyService.purchase_upgrade(current_user_id(), data["upgrade_id"])
    return jsonify(result), 201


# GET a user's spacecraft and multiplier
@space_bp.route('/spacecraft/<int:user_id>', methods=['GET'])
@jwt_required()
def get_user_spacecraft(user_id):
    return jsonify(SpaceService.get_user_spacecraft(user_id)), 200


# equip / unequip an owned upgrade
@space_bp.route('/spacecraft/toggle', methods=['PUT'])
@jwt_required()
@require_fields("upgrade_id", "is_equipped")
def toggle_upgrade_equipped():
    data = request.get_json()
    result = EconomyService.toggle_upgrade_equipped(
        current_user_id(), data["upgrade_id"], data["is_equipped"]
    )
    return jsonify(result), 200


# GET achievements with earned status
@space_bp.route('/achievements/<int:user_id>', methods=['GET'])
@jwt_required()
def get_user_achievements(user_id):
    return jsonify(SpaceService.get_user_achievements(user_id)), 200
