import asyncio
from typing import Any, Callable, List, Optional
from github_manager.utils.logger import get_logger

logger = get_logger(__name__)


class Signal:
    """複数の購読者に通知を配信するシグナル

    イベントループにバインドされている場合、ループ外のスレッドから
    emitされた通知は call_soon_threadsafe でループスレッドに再ディスパッチされます。
    """

    def __init__(self, name: str):
        self.name = name
        self._subscribers: List[Callable[..., Any]] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def bind_loop(self, loop: Optional[asyncio.AbstractEventLoop]):
        """通知を配信するイベントループを設定"""
        self._loop = loop

    def connect(self, callback: Callable[..., Any]):
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def disconnect(self, callback: Callable[..., Any]):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(self, *args: Any):
        """購読者に通知

        Args:
            *args: 購読者に渡す引数
        """
        loop = self._loop
        if loop is not None and not loop.is_closed() and not _is_loop_thread(loop):
            loop.call_soon_threadsafe(self._deliver, *args)
            return
        self._deliver(*args)

    def _deliver(self, *args: Any):
        for callback in list(self._subscribers):
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Subscriber of {self.name} failed: {e}", exc_info=True)


def _is_loop_thread(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


class ManagerSignals:
    """UIレイヤー向けの通知一式"""

    def __init__(self):
        self.repositories_loaded = Signal("repositories_loaded")
        self.repository_details_loaded = Signal("repository_details_loaded")
        self.user_projects_loaded = Signal("user_projects_loaded")
        self.project_details_loaded = Signal("project_details_loaded")
        self.project_created = Signal("project_created")
        self.mutation_completed = Signal("mutation_completed")
        self.item_created = Signal("item_created")
        self.user_name_received = Signal("user_name_received")
        self.project_columns_loaded = Signal("project_columns_loaded")

    def all(self) -> List[Signal]:
        return [value for value in vars(self).values() if isinstance(value, Signal)]

    def bind_loop(self, loop: Optional[asyncio.AbstractEventLoop]):
        for signal in self.all():
            signal.bind_loop(loop)
