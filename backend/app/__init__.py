"""Flask application factory."""

import os
from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

STATIC_FOLDER = os.path.join(os.path.dirname(__file__), "..", "public")

DEFAULT_PROJECT = "HELP"


def load_jira_config(app):
    """Load Jira connection settings from the environment."""
    load_dotenv(override=True)

    app.config.setdefault("JIRA_BASE_URL", os.environ.get("JIRA_BASE_URL"))
    app.config.setdefault("JIRA_EMAIL", os.environ.get("JIRA_EMAIL"))
    app.config.setdefault("JIRA_API_TOKEN", os.environ.get("JIRA_API_TOKEN"))
    app.config.setdefault("JIRA_PROJECT", os.environ.get("JIRA_PROJECT") or DEFAULT_PROJECT)

    missing = [
        key for key in ("JIRA_BASE_URL", "JIRA_EMAIL", "JIRA_API_TOKEN")
        if not app.config.get(key)
    ]
    if missing:
        app.logger.warning(
            f"Missing Jira configuration: {', '.join(missing)}. See .env.example"
        )


def create_app(config=None):
    """Create and configure the Flask application.

    Args:
        config: Optional mapping applied over the environment settings
    """
    app = Flask(__name__, static_folder=STATIC_FOLDER, static_url_path="")

    if config:
        app.config.update(config)

    load_jira_config(app)

    CORS(app, resources={r"/api/*": {"origins": "*"}})

    from app.api import issues
    app.register_blueprint(issues.bp)

    @app.route("/health")
    def health():
        return {"status": "ok"}

    @app.route("/")
    def index():
        return app.send_static_file("index.html")

    return app
