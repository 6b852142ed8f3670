from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
import redis
import json
import logging

db = SQLAlchemy()
jwt = JWTManager()

logger = logging.getLogger(__name__)

# Redis client
redis_client = None


def init_redis(app):
    """Initialize Redis connection"""
    global redis_client
    if not app.config.get('REDIS_ENABLED'):
        redis_client = None
        return
    try:
        redis_client = redis.Redis(
            host=app.config['REDIS_HOST'],
            port=app.config['REDIS_PORT'],
            db=app.config['REDIS_DB'],
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )
        redis_client.ping()
        logger.info("Redis connected successfully")
    except redis.RedisError as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without caching")
        redis_client = None


def cache_set(key, value, expire=300):
    """Set cache with JSON serialization"""
    if redis_client:
        try:
            redis_client.setex(key, expire, json.dumps(value))
            return True
        except redis.RedisError as e:
            logger.error(f"Cache set error: {e}")
    return False


def cache_get(key):
    """Get cache with JSON deserialization"""
    if redis_client:
        try:
            data = redis_client.get(key)
            return json.loads(data) if data else None
        except redis.RedisError as e:
            logger.error(f"Cache get error: {e}")
    return None


def cache_delete(key):
    """Delete cache key"""
    if redis_client:
        try:
            redis_client.delete(key)
            return True
        except redis.RedisError as e:
            logger.error(f"Cache delete error: {e}")
    return False
