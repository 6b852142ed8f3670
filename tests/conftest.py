"""
Pytest configuration and fixtures
"""
import pytest
from app import create_app
from extensions import db
from config import Config

TEST_PASSWORD = 'TestPassword123!'


def make_test_config(tmp_path):
    class TestConfig(Config):
        """Test configuration"""
        TESTING = True
        SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
        SQLALCHEMY_ENGINE_OPTIONS = {}
        JWT_SECRET_KEY = 'test-secret-key-for-testing-only-0123456789'
        SECRET_KEY = 'test-secret'
        REDIS_ENABLED = False
        AI_PROVIDER = 'none'
        SUPABASE_URL = ''
        SUPABASE_KEY = ''
        UPLOAD_FOLDER = str(tmp_path / 'uploads')
        STATIC_FOLDER = str(tmp_path / 'public')
        DEBUG = False

    return TestConfig


@pytest.fixture
def app(tmp_path):
    """Create application for testing"""
    (tmp_path / 'public').mkdir()
    (tmp_path / 'public' / 'login.html').write_text('<h1>Log in</h1>')

    app = create_app(make_test_config(tmp_path))

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


def register(client, email='test@example.com', password=TEST_PASSWORD, **fields):
    return client.post('/api/auth/register', json={'email': email, 'password': password, **fields})


def login(client, email='test@example.com', password=TEST_PASSWORD):
    return client.post('/api/auth/login', json={'email': email, 'password': password})


def headers_for(login_response):
    data = login_response.get_json()
    return {
        'Authorization': f"Bearer {data['access_token']}",
        'X-Session-Token': data['session_token']
    }


@pytest.fixture
def auth_headers(client):
    """Register and log in a test user, returning authentication headers"""
    register(client, firstName='Test', lastName='User', occupation='Student')
    return headers_for(login(client))


@pytest.fixture
def other_headers(client):
    """A second, unrelated user"""
    register(client, email='other@example.com')
    return headers_for(login(client, email='other@example.com'))
