"""
测试配置
"""
import os
import sys
import tempfile

import pytest

# 添加 src 目录到 Python 路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

# 设置测试环境变量（必须在导入 draft_studio 之前）
_test_dir = tempfile.mkdtemp(prefix="draft_studio_test_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_test_dir, 'test_draft_studio.db')}"
os.environ["LOG_LEVEL"] = "DEBUG"

from sqlmodel import Session, SQLModel, select

from draft_studio.core.database import build_engine, init_db
from draft_studio.core.locks import KeyedLock
from draft_studio.models import Draft, DraftVersion
from draft_studio.services import (
    AutosaveService,
    DraftService,
    RevertService,
    VersionService,
)


@pytest.fixture
def test_db():
    """内存数据库 fixture"""
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def file_db(tmp_path):
    """文件数据库 fixture，多个连接/线程可同时访问"""
    engine = build_engine(f"sqlite:///{tmp_path / 'concurrency.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


def make_services(engine, max_retries: int = 3) -> dict:
    """构造一组共享同一把键级锁的服务，相当于一个进程"""
    version_service = VersionService(engine=engine, max_retries=max_retries, locks=KeyedLock())
    return {
        "drafts": DraftService(engine=engine),
        "versions": version_service,
        "autosave": AutosaveService(engine=engine, version_service=version_service),
        "revert": RevertService(version_service=version_service),
    }


@pytest.fixture
def services(test_db):
    return make_services(test_db)


def assert_chain_consistent(engine, draft_id: str) -> None:
    """版本指针等于版本数，且版本号为 1..N 连续"""
    with Session(engine) as session:
        draft = session.get(Draft, draft_id)
        numbers = session.exec(
            select(DraftVersion.version)
            .where(DraftVersion.draft_id == draft_id)
            .order_by(DraftVersion.version)
        ).all()
    assert draft is not None
    assert list(numbers) == list(range(1, draft.current_version + 1))
