"""
BitWord Game Server - Main Entry Point

This is the main entry point for the BitWord game server.
It initializes the repository and game service and starts the Flask application.
"""

from bitword import create_app
from bitword.config import Config, TERM_CATALOG
from bitword.repositories import InMemoryGameRepository, MongoGameRepository
from bitword.services.game_service import initialize_game_service
from bitword.utils.game_logger import game_logger


def create_repository(config_class=Config):
    """MongoDB when a URI is configured, otherwise process-local storage."""
    if config_class.MONGO_URI:
        return MongoGameRepository(config_class.MONGO_URI, config_class.MONGO_DB_NAME)
    return InMemoryGameRepository()


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")

        repository = create_repository(Config)
        storage = 'MongoDB' if Config.MONGO_URI else 'in-memory'
        print(f"✓ Repository initialized ({storage})")

        seeded = repository.seed_terms(TERM_CATALOG)
        if seeded:
            print(f"✓ Seeded {seeded} terms into the catalog")

        initialize_game_service(repository, Config.MAX_ATTEMPTS, Config.MAX_HINTS)
        print("✓ Game service initialized successfully")

        print("Creating Flask application...")
        app = create_app(Config)
        print("✓ Flask application created successfully")

        game_logger.logger.info(f"BitWord Server Starting - storage: {storage}")

        print(f"\nStarting BitWord Game Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("BitWord Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
