from app.database import Base, engine
import app.models  # noqa: F401  registers every model on Base.metadata


def init_db(bind=engine):
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=bind)


def main():
    init_db()
    print("✅ Tables created successfully")


if __name__ == "__main__":
    main()
