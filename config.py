import os
from datetime import timedelta

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', os.getenv('SESSION_SECRET', 'fallback-secret'))

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///jobtrail.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }

    # Redis cache (optional)
    REDIS_ENABLED = os.getenv('REDIS_ENABLED', 'False').lower() == 'true'
    REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
    REDIS_PORT = int(os.getenv('REDIS_PORT', 6379))
    REDIS_DB = int(os.getenv('REDIS_DB', 0))
    CACHE_TTL = int(os.getenv('CACHE_TTL', 300))

    # JWT + database sessions
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'your-secret-key-change-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=30)
    JWT_TOKEN_LOCATION = ['headers']
    JWT_HEADER_NAME = 'Authorization'
    JWT_HEADER_TYPE = 'Bearer'
    SESSION_LIFETIME = timedelta(days=1)
    MAX_ACTIVE_SESSIONS = 5

    # File uploads
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(BASE_DIR, 'uploads'))
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max file size
    ALLOWED_RESUME_EXTENSIONS = {'pdf', 'docx', 'doc', 'txt'}
    ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
    PROFILE_PICTURE_SIZE = (512, 512)

    # Static frontend
    STATIC_FOLDER = os.getenv('STATIC_FOLDER', os.path.join(BASE_DIR, 'public'))

    # AI Configuration
    AI_PROVIDER = os.getenv('AI_PROVIDER', 'openai')  # openai, gemini, none
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY', '')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
    GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-1.5-flash')

    # Supabase Storage (resume files)
    SUPABASE_URL = os.getenv('SUPABASE_URL', '')
    SUPABASE_KEY = os.getenv('SUPABASE_SERVICE_KEY', os.getenv('SUPABASE_KEY', ''))
    SUPABASE_RESUME_BUCKET = os.getenv('SUPABASE_RESUME_BUCKET', 'resumes')

    # External feeds
    JOBS_FEED_URL = os.getenv('JOBS_FEED_URL', 'https://remotive.com/api/remote-jobs')
    NEWS_FEED_URL = os.getenv('NEWS_FEED_URL', 'https://www.yahoo.com/news/rss')
    NEWS_LIMIT = 10
    HTTP_TIMEOUT = int(os.getenv('HTTP_TIMEOUT', 10))

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')
