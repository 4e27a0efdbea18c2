# /exam-portal/app/db/base_class.py

from sqlalchemy.orm import declarative_base, declared_attr


class _Base:
    # Tables are named after the model in lower case, pluralized with a plain "s".
    # Models that need a different name set `__tablename__` explicitly.
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"


Base = declarative_base(cls=_Base)
