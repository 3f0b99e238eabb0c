import sqlalchemy
from sqlalchemy.orm import sessionmaker

from devconnect.config import config

metadata = sqlalchemy.MetaData()

profile_table = sqlalchemy.Table(
    "profiles",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("user_id", sqlalchemy.String, unique=True, nullable=False),
    sqlalchemy.Column("handle", sqlalchemy.String, nullable=False),
)

# Likes and comments are embedded documents, written back with the post
post_table = sqlalchemy.Table(
    "posts",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("author", sqlalchemy.String, nullable=False),
    sqlalchemy.Column("text", sqlalchemy.String, nullable=False),
    sqlalchemy.Column("name", sqlalchemy.String, nullable=True),
    sqlalchemy.Column("avatar", sqlalchemy.String, nullable=True),
    sqlalchemy.Column("likes", sqlalchemy.JSON, nullable=False, default=list),
    sqlalchemy.Column("comments", sqlalchemy.JSON, nullable=False, default=list),
    sqlalchemy.Column("version", sqlalchemy.Integer, nullable=False, default=0),
    sqlalchemy.Column(
        "created_at",
        sqlalchemy.DateTime(timezone=True),
        server_default=sqlalchemy.text("CURRENT_TIMESTAMP"),
        nullable=False,
    ),
)

connect_args = {"check_same_thread": False} if "sqlite" in config.DATABASE_URI else {}
engine = sqlalchemy.create_engine(config.DATABASE_URI, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)

metadata.create_all(engine)
