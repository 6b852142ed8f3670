"""
Test importing users from older backends
"""
import json
import bcrypt
from models.user import User
from services.user_import import import_users
from tests.conftest import login


class TestImportUsers:

    def test_mixed_shapes(self, app):
        result = import_users([
            {'email': 'row@example.com', 'first_name': 'Row', 'last_name': 'Shape',
             'birthday': '2001-04-03T00:00:00.000Z'},
            {'email': 'File@Example.com', 'firstName': 'File', 'gradDate': '2019-05-20'},
            {'email': 'doc@example.com', 'firstname': 'Doc',
             'address': {'city': 'Albany'}, 'education': {'college': 'ASU'}},
        ])

        assert result == {'imported': 3, 'skipped': 0}

        row = User.query.filter_by(email='row@example.com').first()
        assert row.full_name == 'Row Shape'
        assert row.birthday == '2001-04-03'
        assert User.query.filter_by(email='file@example.com').first().grad_date == '2019-05-20'
        doc = User.query.filter_by(email='doc@example.com').first()
        assert doc.city == 'Albany'
        assert doc.college == 'ASU'

    def test_skips_invalid_and_duplicates(self, app):
        result = import_users([
            {'email': 'dup@example.com'},
            {'email': 'DUP@example.com'},
            {'email': 'not-an-email'},
            {'name': 'No email'},
            'junk'
        ])

        assert result == {'imported': 1, 'skipped': 4}

    def test_skips_existing_accounts(self, client):
        client.post('/api/auth/register', json={'email': 'here@example.com', 'password': 'TestPassword123!'})

        assert import_users([{'email': 'here@example.com'}]) == {'imported': 0, 'skipped': 1}

    def test_bcrypt_hash_carried_over(self, client):
        hashed = bcrypt.hashpw(b'Legacy123!', bcrypt.gensalt(rounds=4)).decode()
        import_users([{'email': 'old@example.com', 'password': hashed}])

        assert login(client, email='old@example.com', password='Legacy123!').status_code == 200

    def test_plain_password_not_kept(self, client):
        import_users([{'email': 'plain@example.com', 'password': 'Plaintext1!'}])

        user = User.query.filter_by(email='plain@example.com').first()
        assert user.password_hash != 'Plaintext1!'
        assert login(client, email='plain@example.com', password='Plaintext1!').status_code == 401


class TestImportCommand:

    def test_cli_import(self, app, tmp_path):
        export = tmp_path / 'users.json'
        export.write_text(json.dumps({'users': [{'email': 'cli@example.com', 'first_name': 'Cli'}]}))

        result = app.test_cli_runner().invoke(args=['import-users', str(export)])

        assert result.exit_code == 0
        assert 'Imported 1 users, skipped 0' in result.output
        assert User.query.filter_by(email='cli@example.com').first() is not None
