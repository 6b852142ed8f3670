"""
Test authentication endpoints
"""
import pytest
from extensions import db
from models.user import User, UserSession
from tests.conftest import register, login, headers_for, TEST_PASSWORD


class TestRegister:
    """Test registration"""

    def test_register_success(self, client):
        response = register(
            client,
            email='NewUser@Example.com',
            firstName='Ada',
            lastName='Lovelace',
            birthday='1990-12-10',
            occupation='Engineer',
            street='1 Main St',
            city='Atlanta',
            state='GA',
            zip='30301',
            college='Georgia Tech',
            certificate='BSc',
            gradDate='2012-05-01'
        )

        assert response.status_code == 201
        user = response.get_json()['user']
        assert user['email'] == 'newuser@example.com'
        assert user['fullName'] == 'Ada Lovelace'
        assert user['city'] == 'Atlanta'
        assert user['gradDate'] == '2012-05-01'
        assert 'password' not in user
        assert 'password_hash' not in user

    def test_register_accepts_snake_case_and_nested_fields(self, client):
        response = register(
            client,
            email='nested@example.com',
            first_name='Grace',
            last_name='Hopper',
            address={'city': 'Arlington', 'zip': '22201'},
            education={'college': 'Yale', 'gradDate': '1934-06-01'}
        )

        assert response.status_code == 201
        user = response.get_json()['user']
        assert user['firstName'] == 'Grace'
        assert user['city'] == 'Arlington'
        assert user['zip'] == '22201'
        assert user['college'] == 'Yale'
        assert user['gradDate'] == '1934-06-01'

    def test_register_duplicate_email(self, client):
        register(client, email='duplicate@example.com')
        response = register(client, email='DUPLICATE@example.com')

        assert response.status_code == 409
        assert 'already registered' in response.get_json()['error'].lower()

    def test_register_missing_fields(self, client):
        response = client.post('/api/auth/register', json={'email': 'x@example.com'})

        assert response.status_code == 400
        assert 'required' in response.get_json()['error'].lower()

    def test_register_invalid_email(self, client):
        response = register(client, email='notanemail')

        assert response.status_code == 400
        assert 'email' in response.get_json()['error'].lower()

    def test_register_without_json_body(self, client):
        response = client.post('/api/auth/register', data='email=a@b.com')

        assert response.status_code == 400

    def test_register_rejects_non_object_body(self, client):
        response = client.post('/api/auth/register', json=[1, 2])

        assert response.status_code == 400
        assert 'json object' in response.get_json()['error'].lower()

    @pytest.mark.parametrize('password,should_pass', [
        ('SecurePass123!', True),
        ('Another@Valid1', True),
        ('weak', False),
        ('NoNumber!', False),
        ('nonumber123', False),
        ('NoSpecialChar1', False),
        ('nouppercase123!', False),
    ])
    def test_password_validation(self, client, password, should_pass):
        response = register(client, email='pw@example.com', password=password)

        if should_pass:
            assert response.status_code == 201
        else:
            assert response.status_code == 400
            assert 'password' in response.get_json()['error'].lower()


class TestLogin:
    """Test login and sessions"""

    def test_login_success(self, client):
        register(client, firstName='Test', lastName='User')
        response = login(client)

        assert response.status_code == 200
        data = response.get_json()
        assert data['message'] == 'Login successful'
        assert 'access_token' in data
        assert 'refresh_token' in data
        assert 'session_token' in data
        assert data['user']['fullName'] == 'Test User'

    def test_login_wrong_password(self, client):
        register(client)
        response = login(client, password='WrongPassword123!')

        assert response.status_code == 401
        assert 'invalid' in response.get_json()['error'].lower()

    def test_login_unknown_user(self, client):
        response = login(client, email='nobody@example.com')

        assert response.status_code == 401

    def test_login_rejects_non_object_body(self, client):
        response = client.post('/api/auth/login', json='test@example.com')

        assert response.status_code == 400

    def test_login_missing_fields(self, client):
        response = client.post('/api/auth/login', json={'email': 'test@example.com'})

        assert response.status_code == 400
        assert 'required' in response.get_json()['error'].lower()

    def test_login_inactive_account(self, client):
        register(client)
        user = User.query.filter_by(email='test@example.com').first()
        user.is_active = False
        db.session.commit()

        response = login(client)
        assert response.status_code == 403

    def test_session_limit_revokes_oldest(self, client, app):
        register(client)
        for _ in range(app.config['MAX_ACTIVE_SESSIONS'] + 2):
            login(client)

        active = UserSession.query.filter_by(is_active=True).count()
        assert active == app.config['MAX_ACTIVE_SESSIONS']


class TestCheckSession:
    """Test the session check endpoint"""

    def test_not_logged_in(self, client):
        response = client.get('/api/auth/session')

        assert response.status_code == 200
        assert response.get_json() == {'loggedIn': False}

    def test_garbage_token_is_not_logged_in(self, client):
        response = client.get('/api/auth/session', headers={
            'Authorization': 'Bearer not-a-jwt',
            'X-Session-Token': 'nope'
        })

        assert response.status_code == 200
        assert response.get_json() == {'loggedIn': False}

    def test_logged_in_returns_profile(self, client, auth_headers):
        response = client.get('/api/auth/session', headers=auth_headers)

        data = response.get_json()
        assert data['loggedIn'] is True
        assert data['user']['email'] == 'test@example.com'
        assert data['user']['occupation'] == 'Student'

    def test_logout_revokes_session(self, client, auth_headers):
        response = client.post('/api/auth/logout', headers=auth_headers)
        assert response.status_code == 200

        assert client.get('/api/auth/session', headers=auth_headers).get_json() == {'loggedIn': False}
        assert client.get('/api/users/profile', headers=auth_headers).status_code == 401

    def test_protected_route_requires_session_token(self, client, auth_headers):
        headers = {'Authorization': auth_headers['Authorization']}
        response = client.get('/api/users/profile', headers=headers)

        assert response.status_code == 401
        assert response.get_json()['authenticated'] is False

    def test_protected_route_requires_jwt(self, client):
        response = client.get('/api/users/profile')

        assert response.status_code == 401

    def test_refresh_issues_access_token(self, client):
        register(client)
        refresh_token = login(client).get_json()['refresh_token']

        response = client.post('/api/auth/refresh', headers={'Authorization': f'Bearer {refresh_token}'})

        assert response.status_code == 200
        assert 'access_token' in response.get_json()

    def test_refresh_rejects_access_token(self, client):
        register(client)
        access_token = login(client).get_json()['access_token']

        response = client.post('/api/auth/refresh', headers={'Authorization': f'Bearer {access_token}'})

        assert response.status_code in (401, 422)


class TestLegacyPasswords:
    """Accounts imported with bcrypt hashes"""

    def test_bcrypt_hash_login_and_rehash(self, client):
        import bcrypt

        user = User(email='legacy@example.com',
                    password_hash=bcrypt.hashpw(b'OldPassword1!', bcrypt.gensalt(rounds=4)).decode())
        db.session.add(user)
        db.session.commit()

        response = login(client, email='legacy@example.com', password='OldPassword1!')
        assert response.status_code == 200

        db.session.expire_all()
        user = User.query.filter_by(email='legacy@example.com').first()
        assert not user.has_legacy_hash()
        assert user.check_password('OldPassword1!')

    def test_headers_work_after_login(self, client):
        register(client)
        headers = headers_for(login(client, password=TEST_PASSWORD))

        assert client.get('/api/users/profile', headers=headers).status_code == 200
