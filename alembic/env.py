import os, sys
from alembic import context
from sqlalchemy import engine_from_config, pool

# project root on sys.path so sipscribe imports without an install
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from sipscribe.config import get_settings
from sipscribe.db import Base
from sipscribe import models  # noqa

# alembic.ini has no logger sections, so fileConfig() is not called
config = context.config
target_metadata = Base.metadata

def build_db_url():
    # an explicit sqlalchemy.url (tests, -x overrides) wins over the environment
    return config.get_main_option("sqlalchemy.url") or get_settings().db_url

def run_migrations_offline():
    context.configure(
        url=build_db_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    cfg = config.get_section(config.config_ini_section) or {}
    cfg["sqlalchemy.url"] = build_db_url()
    connectable = engine_from_config(cfg, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=True,
        )
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
