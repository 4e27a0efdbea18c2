# /exam-portal/app/db/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import DATABASE_URL

# SQLite connections are shared with FastAPI's worker threads; server databases
# get a liveness check on checkout instead.
if DATABASE_URL.startswith("sqlite"):
    engine_args = {"connect_args": {"check_same_thread": False}}
else:
    engine_args = {"pool_pre_ping": True}
engine = create_engine(DATABASE_URL, **engine_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Request-scoped session, closed once the response is sent.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
