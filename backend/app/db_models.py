# Import all models once to ensure the SQLAlchemy mapper registry is fully populated
# before metadata is used (create_all, migrations, CLI).

from .users.models import User  # noqa: F401
