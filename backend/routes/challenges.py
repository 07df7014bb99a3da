from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from services.core_services import ChallengeService, EconomyService
from utils.request_guards import current_user_id, require_fields

challenges_bp = Blueprint('challenges_bp', __name__)


#Create new challenge
@challenges_bp.route('/', methods=['POST'])
@jwt_required()
@require_fields("description", "points")
def create_challenge():
    data = request.get_json()
    challenge = ChallengeService.create_challenge(
        current_user_id(), data["description"], data["points"]
    )
    return jsonify(challenge), 201


# get all challenges
@challenges_bp.route('/', methods=['GET'])
def get_challenges():
    return jsonify(ChallengeService.list_challenges()), 200


# update a challenge (creator only)
@challenges_bp.route('/<int:challenge_id>', methods=['PUT'])
@jwt_required()
@require_fields("description", "points")
def update_challenge(challenge_id):
    data = request.get_json()
    challenge = ChallengeService.update_challenge(
        challenge_id, current_user_id(), data["description"], data["points"]
    )
    return jsonify(challenge), 200


# delete a challenge (creator only)
@challenges_bp.route('/<int:challenge_id>', methods=['DELETE'])
@jwt_required()
def delete_challenge(challenge_id):
    ChallengeService.delete_challenge(challenge_id, current_user_id())
    return "", 204


# complete a challenge and earn fuel
@challenges_bp.route('/<int:challenge_id>/completions', methods=['POST'])
@jwt_required()
@require_fields("details")
def create_completion(challenge_id):
    data = request.get_json()
    result = EconomyService.complete_challenge(current_user_id(), challenge_id, data["details"])
    return jsonify(result), 201


# GET every completion of a challenge
@challenges_bp.route('/<int:challenge_id>/completions', methods=['GET'])
def get_completions(challenge_id):
    return jsonify(ChallengeService.get_completions(challenge_id)), 200


# GET the caller's completions of a challenge
@challenges_bp.route('/<int:challenge_id>/my-completions', methods=['GET'])
@jwt_required()
def get_my_completions(challenge_id):
    return jsonify(ChallengeService.get_user_completions(challenge_id, current_user_id())), 200
