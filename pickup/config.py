import os


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-prod')
    PORT = int(os.getenv('PORT', '3000'))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Document store: memory, sql or firestore
    STORE_BACKEND = os.getenv('STORE_BACKEND', 'sql')

    # Database (sql backend)
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///pickup.db')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Create missing tables on startup; deployments run manage_db.py instead
    AUTO_CREATE_TABLES = True

    # Firebase (firestore backend and sign-in)
    FIREBASE_CREDENTIALS = os.getenv('FIREBASE_CREDENTIALS', 'serviceAccountKey.json')
    FIREBASE_API_KEY = os.getenv('FIREBASE_API_KEY', '')
    FIREBASE_AUTH_DOMAIN = os.getenv('FIREBASE_AUTH_DOMAIN', '')
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID', '')

    # Only a signed-in creator may delete the game they created
    ENFORCE_GAME_OWNERSHIP = os.getenv('ENFORCE_GAME_OWNERSHIP', 'true').lower() == 'true'


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    STORE_BACKEND = 'sql'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    ENFORCE_GAME_OWNERSHIP = True


class ProductionConfig(Config):
    DEBUG = False
    AUTO_CREATE_TABLES = os.getenv('AUTO_CREATE_TABLES', 'false').lower() == 'true'
    STORE_BACKEND = os.getenv('STORE_BACKEND', 'firestore')


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
