"""
BitWord Game Server Application Package

A daily Hangman-style game over Bitcoin and crypto vocabulary: one word per
difficulty per day, three wrong guesses, one hint, and per-player statistics.
"""

from flask import Flask
from flask_cors import CORS
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    The game service is expected to be initialized before requests arrive
    (see main.py); endpoints answer 500 otherwise.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask application instance with all blueprints registered
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)

    # Register blueprints
    from .controllers.game_controller import game_bp
    from .controllers.session_controller import session_bp
    from .controllers.stats_controller import stats_bp
    from .controllers.word_controller import word_bp

    app.register_blueprint(word_bp, url_prefix='/api')
    app.register_blueprint(game_bp, url_prefix='/api')
    app.register_blueprint(session_bp, url_prefix='/api')
    app.register_blueprint(stats_bp, url_prefix='/api')

    return app
