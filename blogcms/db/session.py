# blogcms/db/session.py
from sqlalchemy.orm import declarative_base

# Metadata compartida por los modelos, Alembic y los tests.
Base = declarative_base()
