"""
数据库连接管理 - 统一管理数据库连接
"""
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, create_engine

from draft_studio.core.config import get_settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    根据连接串创建引擎

    SQLite 文件库会自动创建所在目录，并开启外键约束以保证级联删除生效
    """
    url = make_url(database_url)
    connect_args = {}

    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False, "timeout": 30}
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    new_engine = create_engine(database_url, echo=echo, connect_args=connect_args)

    if url.get_backend_name() == "sqlite":
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)

    return new_engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_db(target: Engine | None = None) -> None:
    """创建所有表"""
    # 导入模型以注册到 metadata
    from draft_studio import models  # noqa: F401

    SQLModel.metadata.create_all(target or engine)


# 创建全局数据库引擎
_settings = get_settings()
engine = build_engine(_settings.database_url)

__all__ = ["engine", "build_engine", "init_db"]
