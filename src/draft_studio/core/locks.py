"""
按草稿 ID 加锁 - 进程内串行化同一草稿的版本写入
"""
import threading
from contextlib import contextmanager
from typing import Iterator


class KeyedLock:
    """
    键级互斥锁

    每个键对应一把 threading.Lock，无人持有或等待时自动回收，
    不同键之间互不阻塞
    """

    def __init__(self):
        self._guard = threading.Lock()
        # {key: [lock, 持有或等待的线程数]}
        self._locks: dict[str, list] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# 全局单例：所有版本链写操作共享
draft_locks = KeyedLock()
