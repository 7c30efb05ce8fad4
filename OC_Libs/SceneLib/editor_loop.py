"""
Editor event loop.

Runs a private asyncio event loop on one background thread. The scene editor
lives on that thread: a UI thread submits commands with ``call`` (plain
functions) or ``submit`` (coroutines) and gets a concurrent.futures.Future
back. Blocking work started by the editor (image downloads and decoding)
goes to the loop's thread pool, so the loop thread stays responsive and is
the only writer of scene state.

Classes:
    EditorLoop: Background event loop with a worker thread pool
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class EditorLoop:
    """
    Background asyncio loop for issuing editor commands from another thread.

    Example:
        >>> with EditorLoop() as loop:
        ...     editor = loop.call(SceneEditor().open).result()
        ...     loop.call(editor.add_text).result()
        ...     loop.submit(editor.add_image(url)).result()
    """

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._executor: Optional[concurrent.futures.ThreadPoolExecutor] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def loop(self) -> Optional[asyncio.AbstractEventLoop]:
        return self._loop

    def start(self) -> "EditorLoop":
        """Start the loop thread. Starting a running loop does nothing."""
        if self.is_running:
            return self

        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="open-canvas-io",
        )
        self._loop = asyncio.new_event_loop()
        self._loop.set_default_executor(self._executor)

        started = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(started,),
            name="open-canvas-editor",
            daemon=True,
        )
        self._thread.start()
        started.wait()
        logger.debug("Editor loop started")
        return self

    def _run(self, started: threading.Event) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.call_soon(started.set)
        try:
            self._loop.run_forever()
        finally:
            self._loop.close()

    def submit(self, coro: Awaitable[Any]) -> concurrent.futures.Future:
        """Schedule a coroutine on the loop thread."""
        if not self.is_running:
            raise RuntimeError("EditorLoop is not running")
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> concurrent.futures.Future:
        """Run a plain callable on the loop thread."""
        if not callable(fn):
            raise ValueError(f"fn must be callable, got {type(fn)}")

        async def _invoke():
            return fn(*args, **kwargs)

        return self.submit(_invoke())

    async def _cancel_pending(self) -> None:
        current = asyncio.current_task()
        pending = [task for task in asyncio.all_tasks() if task is not current]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    def stop(self, timeout: float = 5.0) -> None:
        """Cancel pending commands, stop the loop and release the workers."""
        if not self.is_running:
            return

        try:
            self.submit(self._cancel_pending()).result(timeout)
        except concurrent.futures.TimeoutError:
            logger.warning("Timed out cancelling pending editor commands")

        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        self._executor.shutdown(wait=False)

        self._thread = None
        self._executor = None
        logger.debug("Editor loop stopped")

    def __enter__(self) -> "EditorLoop":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
