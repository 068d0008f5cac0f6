from threading import Lock

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config


def build_engine(database_url: str, **engine_options):
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, **engine_options)

    sqlite_engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False, "timeout": 30},
        **engine_options,
    )

    # Every transaction holds the write lock from its first statement.
    @event.listens_for(sqlite_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _begin_immediate(connection):
        connection.exec_driver_sql("BEGIN IMMEDIATE")

    return sqlite_engine


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

ACTIVE_SLOT_INDEX_NAME = 'uq_appointments_active_slot'

_schema_lock = Lock()
_appointment_schema_checked = False


def ensure_appointment_schema(bind=None) -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked and bind is None:
        return

    with _schema_lock:
        if _appointment_schema_checked and bind is None:
            return

        target = bind or engine
        inspector = inspect(target)

        if 'appointments' not in inspector.get_table_names():
            _appointment_schema_checked = bind is None
            return

        existing_columns = {column['name'] for column in inspector.get_columns('appointments')}
        migration_steps = [
            ('decline_reason', 'ALTER TABLE appointments ADD COLUMN decline_reason VARCHAR'),
            ('account_id', 'ALTER TABLE appointments ADD COLUMN account_id INTEGER'),
        ]

        with target.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text(
                    f'CREATE UNIQUE INDEX IF NOT EXISTS {ACTIVE_SLOT_INDEX_NAME} '
                    "ON appointments(date, slot) WHERE status != 'Declined'"
                )
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_account ON appointments(account_id)')
            )

        if bind is None:
            _appointment_schema_checked = True


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
