# app.py
import logging

import click
from flask import Flask, jsonify, request
from flask_migrate import Migrate

from config import Config
from extensions import db, login_manager


def create_app(config_object=Config) -> Flask:
    """
    App factory.
    - Carga configuración
    - Inicializa extensiones
    - Registra blueprints
    - Conecta migraciones y comandos de CLI
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Extensiones
    db.init_app(app)
    login_manager.init_app(app)

    from models import Teacher
    from services.tokens import TokenError, decode_access_token

    @login_manager.user_loader
    def load_user(user_id: str):
        try:
            return db.session.get(Teacher, int(user_id))
        except (TypeError, ValueError):
            return None

    # La API es stateless: cada request trae su token Bearer
    @login_manager.request_loader
    def load_user_from_token(req):
        header = req.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None
        try:
            payload = decode_access_token(token.strip(), app.config)
        except TokenError as exc:
            app.logger.info("Token rechazado: %s", exc)
            return None

        try:
            teacher = db.session.get(Teacher, int(payload["sub"]))
        except (TypeError, ValueError):
            return None
        if teacher is None or not teacher.is_active:
            return None
        return teacher

    @login_manager.unauthorized_handler
    def unauthorized():
        app.logger.info("Acceso sin autenticación a %s", request.path)
        return jsonify({"error": "Token de autenticación ausente o inválido."}), 401

    # Blueprints de la capa API
    from api import api_bp
    from api.auth import auth_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(auth_bp)

    # Migraciones (Alembic/Flask-Migrate)
    Migrate(app, db)

    @app.cli.command("init-db")
    def init_db_command():
        """Crea las tablas que falten."""
        import models  # noqa: F401

        db.create_all()
        click.echo("Tablas creadas.")

    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Carga escuelas, docentes y alumnos de demo."""
        from seeds.basic_seed import run_basic_seed

        summary = run_basic_seed()
        click.echo(f"Seed cargado: {summary}")

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
