import logging
from flask import Flask
from flask_cors import CORS

from .config import Config
from .errors import register_error_handlers
from .models import db
from .store import store

# Configure logging
logging.basicConfig(level=getattr(logging, Config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.config.from_object(Config)
CORS(app, resources={r"/api/*": {
    "origins": [app.config["FRONTEND_URL"], "http://localhost:3000"],
    "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    "allow_headers": ["Content-Type", "Authorization"],
}})
db.init_app(app)
register_error_handlers(app)


def init_db():
    """Create tables and seed the demo user (inside an app context)."""
    db.create_all()
    if app.config.get("SEED_DEMO_USER"):
        store.ensure_demo_user()


# Create database tables
with app.app_context():
    init_db()
    logger.info(f"Database ready at {db.engine.url!r}")

# Route modules register themselves on ``app``
from . import analysis, availability, deliverables, projects, tasks, users  # noqa: E402,F401
