from sqlmodel import SQLModel, Session, create_engine

from catalog.config import get_settings

settings = get_settings()

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=settings.db_echo,
    connect_args=connect_args,
)


def init_db():
    SQLModel.metadata.create_all(engine)


# Dependency
def get_session():
    with Session(engine) as session:
        yield session
