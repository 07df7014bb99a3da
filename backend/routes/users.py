from datetime import timedelta

from flask import Blueprint, jsonify, request
from flask_jwt_extended import create_access_token, jwt_required

from services.core_services import UserService
from utils.request_guards import require_fields, self_only

users_bp = Blueprint('users_bp', __name__)


@users_bp.route('/register', methods=['POST'])
@require_fields("username", "password")
def register():
    data = request.get_json()
    user = UserService.register(data["username"], data["password"], data.get("email"))
    return jsonify(user), 201


@users_bp.route('/login', methods=['POST'])
@require_fields("username", "password")
def login():
    data = request.get_json()
    user = UserService.authenticate(data["username"], data["password"])
    if not user:
        return jsonify({'error': 'Invalid username or password.'}), 401

    # Create JWT token (identity as string to avoid errors)
    access_token = create_access_token(
        identity=str(user.id),
        expires_delta=timedelta(hours=24)
    )

    return jsonify({
        **user.to_dict(),
        'token': access_token,
        'message': 'Login successful!'
    }), 200


# GET users ranked by fuel
@users_bp.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    limit = request.args.get('limit', type=int)
    return jsonify(UserService.get_leaderboard(limit)), 200


@users_bp.route('/', methods=['GET'])
@jwt_required()
def get_all_users():
    return jsonify(UserService.list_users()), 200


@users_bp.route('/<int:user_id>', methods=['GET'])
@jwt_required()
def get_user(user_id):
    return jsonify(UserService.get_user(user_id)), 200


# UPDATE own username
@users_bp.route('/<int:user_id>', methods=['PUT'])
@jwt_required()
@self_only
@require_fields("username")
def update_user(user_id):
    data = request.get_json()
    return jsonify(UserService.update_username(user_id, data["username"])), 200
