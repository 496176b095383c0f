# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""
Job dispatcher.

Owns the lifecycle of one background-removal job at a time. Each job gets a
fresh worker process; a relay thread in this process reads the worker's
queue, re-emits progress to listeners and resolves the job's Future with
the terminal result. A worker that dies without reporting is turned into a
Failure, so the Future always resolves.
"""

from __future__ import annotations

from concurrent.futures import Future
import logging
import multiprocessing
import queue
import threading
import time
from typing import Callable, List, Optional

from . import config
from .models import Failure, JobRequest, JobResult, ProgressEvent, failure_from_exception
from .worker import MSG_COMPLETE, MSG_PROGRESS, Backend, run_job

logger = logging.getLogger(__name__)

ProgressListener = Callable[[ProgressEvent], None]

# How long a finished worker gets to exit before it is terminated
JOIN_TIMEOUT = 5.0


class JobDispatcher:
    def __init__(self, backend: Optional[Backend] = None,
                 settings: Optional[config.Settings] = None,
                 context=None):
        self._settings = settings or config.get_settings()
        self._ctx = context or multiprocessing.get_context(self._settings.start_method)
        self._backend = backend
        self._listeners: List[ProgressListener] = []
        self._lock = threading.Lock()
        self._future: Optional[Future] = None
        self._process = None

    # Listeners

    def add_listener(self, listener: ProgressListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ProgressListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _emit(self, event: ProgressEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Progress listener failed")

    # Jobs

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._future is not None and not self._future.done()

    def submit(self, path: str) -> "Future[JobResult]":
        """Start a worker for ``path``; the returned Future always resolves."""
        future: Future = Future()
        with self._lock:
            if self._future is not None and not self._future.done():
                future.set_result(Failure(config.JOB_IN_PROGRESS))
                return future
            self._future = future

        channel = process = None
        try:
            channel = self._ctx.Queue()
            process = self._ctx.Process(
                target=run_job,
                args=(JobRequest(path), channel, self._backend, self._settings.log_level),
                name="nobg-worker",
                daemon=True,
            )
            process.start()
            logger.info("Worker pid=%s started for %s", process.pid, path)
            with self._lock:
                self._process = process
            threading.Thread(
                target=self._relay, args=(process, channel, future),
                name="nobg-relay", daemon=True,
            ).start()
        except Exception as e:
            logger.exception("Could not start job for %s", path)
            self._abort_start(process, channel)
            future.set_result(failure_from_exception(e, prefix="Could not start worker"))
        return future

    def _abort_start(self, process, channel) -> None:
        """Tear down whatever part of a job was created before start-up failed."""
        if process is not None and process.pid is not None and process.is_alive():
            process.terminate()
            process.join(JOIN_TIMEOUT)
        if channel is not None:
            channel.close()
        with self._lock:
            self._process = None

    def _relay(self, process, channel, future: Future) -> None:
        """Pump worker messages until a terminal result or the worker is gone."""
        poll = self._settings.poll_interval_seconds
        result: Optional[JobResult] = None
        deadline = None
        try:
            while result is None:
                try:
                    msg = channel.get(timeout=poll)
                except queue.Empty:
                    if process.is_alive():
                        continue
                    # Dead worker: drain whatever it flushed before exiting
                    if deadline is None:
                        deadline = time.monotonic() + self._settings.drain_grace_seconds
                    elif time.monotonic() >= deadline:
                        break
                    continue

                if msg[0] == MSG_PROGRESS:
                    self._emit(ProgressEvent(phase_key=msg[1], percent_complete=msg[2]))
                elif msg[0] == MSG_COMPLETE:
                    result = msg[1]
                else:
                    logger.warning("Ignoring unknown worker message: %r", msg[0])
        except Exception as e:
            logger.exception("Lost contact with worker pid=%s", process.pid)
            result = failure_from_exception(e)
        finally:
            process.join(JOIN_TIMEOUT)
            if process.is_alive():
                logger.warning("Worker pid=%s did not exit; terminating", process.pid)
                process.terminate()
                process.join()
            channel.close()

        if result is None:
            logger.error("Worker pid=%s exited with code %s and no result",
                         process.pid, process.exitcode)
            result = Failure(config.WORKER_CRASHED)

        with self._lock:
            self._process = None
        logger.info("Job finished: %s", "ok" if result.ok else result.reason)
        future.set_result(result)

    def shutdown(self) -> None:
        """Terminate a running worker, if any. Its Future resolves as a crash."""
        with self._lock:
            process = self._process
        if process is not None and process.is_alive():
            logger.info("Terminating worker pid=%s", process.pid)
            process.terminate()
