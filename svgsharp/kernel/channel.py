from typing import Callable


class SimpleLogger:
    def __init__(self, name: str):
        self.name = name

    def warning(self, message: str):
        print(f"[{self.name}-Warning] {message}")


# Reports failures inside the channels themselves
logger = SimpleLogger(__name__)


class Channel:
    """
    Sends parser diagnostics to every registered watcher.

    Usage:
        channel = Channel("svg/warn")
        channel.watch(print)
        channel("Unrecognized element: foo")
    """

    def __init__(self, name: str):
        self.name = name
        self.watchers = []

    def __repr__(self):
        return f"Channel({repr(self.name)})"

    def __call__(self, message: str):
        for watcher in self.watchers[:]:
            try:
                watcher(message)
            except Exception as e:
                # One broken watcher must not stop the others
                logger.warning(f"Watcher error in channel '{self.name}': {type(e).__name__}: {e}")

    def watch(self, monitor_function: Callable):
        if any(w is monitor_function for w in self.watchers):
            return
        self.watchers.append(monitor_function)
