from pathlib import Path

from fastapi import Request
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session


def make_engine(config):
    url = config.database_url
    kwargs = {"echo": config.debug}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            # Créer le dossier data/ si besoin
            db_path = Path(url.split("sqlite:///", 1)[-1])
            db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, **kwargs)


def init_db(engine):
    # Importer les modèles pour enregistrer les tables
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    with Session(request.app.state.engine) as session:
        yield session
