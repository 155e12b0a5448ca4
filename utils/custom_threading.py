"""
Script contains functions for threading
"""

from concurrent import futures
from utils.logger import logger


class ThreadExecutor:
    """
    Class to handle a bounded pool of threads
    """
    def __init__(self, max_workers=None, thread_name_prefix="worker"):
        self.max_workers = max_workers
        self.executor = futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        # Queued work is dropped when we leave because of an error or Ctrl-C
        self.shutdown(wait=exc_type is None)
        return False

    def shutdown(self, wait=True):
        logger.debug(f"ThreadExecutor: shutting down (wait={wait})")
        self.executor.shutdown(wait=wait, cancel_futures=not wait)

    def submit(self, fn, *args, **kwargs):
        return self.executor.submit(fn, *args, **kwargs)
