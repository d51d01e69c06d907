import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SECRET = 'dev-secret-key-change-in-production'


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY') or DEFAULT_SECRET

    # JWT (bearer identity tokens)
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY') or DEFAULT_SECRET
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_EXPIRES_HOURS', '8')))
    JWT_TOKEN_LOCATION = ['headers']

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///clinic.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Upper bound (seconds) on waiting for the database
    DB_TIMEOUT_SECONDS = int(os.getenv('DB_TIMEOUT_SECONDS', '10'))
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
        'pool_timeout': DB_TIMEOUT_SECONDS,
    }

    # CORS
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://localhost:5174').split(',')

    # Rate limiting (Flask-Limiter)
    RATELIMIT_ENABLED = os.getenv('RATELIMIT_ENABLED', 'true').lower() == 'true'
    RATELIMIT_DEFAULT = os.getenv('RATELIMIT_DEFAULT', '1000 per 15 minutes')
    RATELIMIT_STORAGE_URI = os.getenv('REDIS_URL', 'memory://')
    RATELIMIT_HEADERS_ENABLED = True

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')

    # Request bodies are small JSON documents
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(10 * 1024 * 1024)))  # 10MB

    SERVICE_NAME = 'clinic-frontdesk'


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')

    # Database connection pool for production
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 3600,
        'pool_size': 20,
        'max_overflow': 40,
        'pool_timeout': Config.DB_TIMEOUT_SECONDS,
        'connect_args': {
            'connect_timeout': Config.DB_TIMEOUT_SECONDS,
            'options': f'-c statement_timeout={Config.DB_TIMEOUT_SECONDS * 1000}'
        }
    }

    @staticmethod
    def validate():
        """Refuse to run production with the development secrets"""
        for key in ('SECRET_KEY', 'JWT_SECRET_KEY'):
            value = os.getenv(key)
            if not value or value == DEFAULT_SECRET:
                raise ValueError(f"{key} environment variable must be set in production and must not be the default value")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv('TEST_DATABASE_URL', 'sqlite:///:memory:')
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = 'testing-jwt-secret-key-with-enough-length'
    RATELIMIT_ENABLED = False


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration based on FLASK_ENV"""
    env = os.getenv('FLASK_ENV', 'development')
    return config.get(env, config['default'])
