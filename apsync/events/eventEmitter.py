"""
EventEmitter: Named-event publish/subscribe for managers and sockets.

on(event, listener), once(event, listener), off(event, listener)
emit(event, *args) -> delivers synchronously to every listener in registration order
wait(event, timeout) -> awaits the next emission and returns its arguments

Property of Uncompromising Sensors LLC.
"""


# Imports
import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple

# Local imports
from apsync.logging import getLogger


class EventEmitter:
    """
    Base class for anything that publishes named events.

    Listener errors are logged with traceback and do not stop delivery to
    the remaining listeners. Coroutine listeners are scheduled as tasks on
    the running loop."""


    def __init__(self):
        self.log = getLogger()
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}
        self._pendingTasks: set = set()


    def on(self, event: str, listener: Callable[..., Any]) -> 'EventEmitter':
        if not callable(listener):
            raise ValueError(f"Listener must be callable, got {type(listener)}")
        self._listeners.setdefault(event, []).append(listener)
        return self


    def once(self, event: str, listener: Callable[..., Any]) -> 'EventEmitter':
        def wrapper(*args):
            self.off(event, wrapper)
            return listener(*args)
        wrapper._onceOriginal = listener
        return self.on(event, wrapper)


    def off(self, event: str, listener: Callable[..., Any]) -> 'EventEmitter':
        listeners = self._listeners.get(event, [])
        for registered in listeners:
            if registered is listener or getattr(registered, '_onceOriginal', None) is listener:
                listeners.remove(registered)
                break
        if not listeners:
            self._listeners.pop(event, None)
        return self


    def listenerCount(self, event: str) -> int:
        return len(self._listeners.get(event, []))


    def emit(self, event: str, *args) -> bool:
        """Deliver to every listener. Returns False when nobody is listening."""
        listeners = list(self._listeners.get(event, []))
        if not listeners:
            return False

        for listener in listeners:
            try:
                result = listener(*args)
                if asyncio.iscoroutine(result):
                    task = asyncio.get_running_loop().create_task(result)
                    self._pendingTasks.add(task)
                    task.add_done_callback(self._listenerTaskDone)
            except Exception as e:
                self.log.error(f'Listener error on {event}: {e}', event=event, exc_info=True)
        return True


    async def wait(self, event: str, timeout: Optional[float] = None) -> Tuple[Any, ...]:
        """Wait for the next emission of event and return its arguments."""
        future = asyncio.get_running_loop().create_future()

        def resolve(*args):
            if not future.done():
                future.set_result(args)

        self.once(event, resolve)
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            self.off(event, resolve)


    def _listenerTaskDone(self, task: asyncio.Task):
        self._pendingTasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self.log.error(f'Async listener error: {task.exception()}', exc_info=task.exception())
