import secrets

from flask import Flask
from flask_wtf.csrf import CSRFProtect

from config import Config
from errors import register_error_handlers
from logging_config import setup_logging
from routes.auth import auth_bp
from routes.accounts import accounts_bp
from routes.transactions import transactions_bp
from routes.subscriptions import subscriptions_bp
from routes.budget_goals import budget_goals_bp
from routes.analytics import analytics_bp
from routes.dashboard import dashboard_bp

csrf = CSRFProtect()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = secrets.token_hex(32)

    setup_logging(app)
    config_class.init_db(app)
    csrf.init_app(app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(accounts_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(subscriptions_bp)
    app.register_blueprint(budget_goals_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(dashboard_bp)

    return app


if __name__ == "__main__":
    create_app().run()
