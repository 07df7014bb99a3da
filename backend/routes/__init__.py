from .users import users_bp
from .challenges import challenges_bp
from .space import space_bp



def register_blueprints(app):
    app.register_blueprint(users_bp, url_prefix="/users")
    app.register_blueprint(challenges_bp, url_prefix="/challenges")
    app.register_blueprint(space_bp, url_prefix="/space")
