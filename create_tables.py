from blinkvocab.db import models  # noqa: F401  # registers every table on Base.metadata
from blinkvocab.db.base import Base
from blinkvocab.db.session import engine

if __name__ == "__main__":
    print("Creating tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created.")
