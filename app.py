from flask import Flask, redirect, jsonify
from flask_cors import CORS
from dotenv import load_dotenv
from config import Config
from extensions import db, jwt, init_redis
from middleware import register_error_handlers, request_logger
from routes.auth import auth_bp
from routes.users import users_bp, profile_files_bp
from routes.resumes import resumes_bp, resume_files_bp
from routes.jobs import jobs_bp
from routes.interviews import interviews_bp
from routes.applications import applications_bp
from routes.news import news_bp
from services.resume_storage import init_resume_storage
import click
import json
import logging
import os

load_dotenv()


def configure_logging(app):
    logging.basicConfig(
        level=getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def register_commands(app):
    @app.cli.command('init-db')
    def init_db_command():
        """Create all database tables"""
        db.create_all()
        click.echo('Database tables created')

    @app.cli.command('import-users')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def import_users_command(path):
        """Import users from a legacy JSON export (a list of user records)"""
        from services.user_import import import_users

        with open(path, encoding='utf-8') as f:
            records = json.load(f)
        if isinstance(records, dict):
            records = records.get('users', [])

        db.create_all()
        result = import_users(records)
        click.echo(f"Imported {result['imported']} users, skipped {result['skipped']}")


def create_app(config_class=Config):
    app = Flask(__name__, static_folder=config_class.STATIC_FOLDER, static_url_path='')
    app.config.from_object(config_class)

    configure_logging(app)
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    init_redis(app)
    init_resume_storage(app)

    CORS(app, origins=app.config['CORS_ORIGINS'])

    # Register middleware
    register_error_handlers(app)
    request_logger(app)

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(resumes_bp, url_prefix='/api/resumes')
    app.register_blueprint(jobs_bp, url_prefix='/api/jobs')
    app.register_blueprint(interviews_bp, url_prefix='/api/interviews')
    app.register_blueprint(applications_bp, url_prefix='/api/applications')
    app.register_blueprint(news_bp, url_prefix='/api/news')
    app.register_blueprint(profile_files_bp)
    app.register_blueprint(resume_files_bp)

    register_commands(app)

    with app.app_context():
        db.create_all()

    @app.route('/')
    def index():
        return redirect('/login.html')

    @app.route('/api/health')
    def health_check():
        return jsonify({'status': 'healthy', 'message': 'JobTrail API running'}), 200

    return app


if __name__ == '__main__':
    app = create_app()
    port = int(os.getenv('PORT', 3000))
    app.run(debug=os.getenv('FLASK_DEBUG', 'False').lower() == 'true', host='0.0.0.0', port=port)
