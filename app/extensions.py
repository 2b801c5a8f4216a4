"""Flask extension singletons.

Created unbound here and attached to the app in ``create_app`` so models,
repositories and CLI commands can import them without circular imports.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()
