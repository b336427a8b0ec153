"""
HTTP transport for posting records to a collector endpoint
"""

import base64
import json
import logging
import threading
import time
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError

from ..periodic import PeriodicTask
from ..records import LogRecord

logger = logging.getLogger(__name__)

@dataclass
class HTTPTransportConfig:
    """Configuration for HTTP transport"""

    url: str = ""
    method: str = "POST"
    headers: Dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/json"})

    # Authentication
    auth_type: str = "none"  # none, basic, bearer, api_key
    username: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None
    api_key: Optional[str] = None
    api_key_header: str = "X-API-Key"

    # Delivery
    batch: bool = False
    flush_interval: float = 2.0
    timeout: float = 5.0
    max_retries: int = 3
    retry_delay: float = 1.0
    max_queue: int = 10000
    synchronous: bool = False

    user_agent: str = "logroute/0.1.0"

class HTTPTransport:
    """Queue records and POST them as a JSON array

    Without batching every record is sent as soon as it arrives. With
    batching, the first queued record starts a periodic flush. Records stay
    in the bounded queue until a send takes them, so at most ``max_queue``
    records wait while one payload is in flight; past that the oldest
    queued record is dropped.
    """

    def __init__(self, config: HTTPTransportConfig):
        self.config = config
        self._queue: List[Dict[str, Any]] = []
        self._lock = threading.Lock()
        self._timer = PeriodicTask(config.flush_interval, self.flush, name="logroute-http-flush")
        self._executor: Optional[ThreadPoolExecutor] = None
        self._draining = False
        self.dropped = 0
        self.closed = False
        self._setup_auth()

    def _setup_auth(self) -> None:
        """Setup authentication headers"""
        self.auth_headers: Dict[str, str] = {}

        if self.config.auth_type == "bearer" and self.config.token:
            self.auth_headers["Authorization"] = f"Bearer {self.config.token}"
        elif self.config.auth_type == "api_key" and self.config.api_key:
            self.auth_headers[self.config.api_key_header] = self.config.api_key
        elif self.config.auth_type == "basic" and self.config.username:
            credentials = f"{self.config.username}:{self.config.password or ''}"
            encoded = base64.b64encode(credentials.encode()).decode()
            self.auth_headers["Authorization"] = f"Basic {encoded}"

    def __call__(self, record: LogRecord) -> None:
        if self.closed or not self.config.url:
            return
        with self._lock:
            if len(self._queue) >= max(1, self.config.max_queue):
                self._queue.pop(0)
                self.dropped += 1
            self._queue.append(record.to_dict())
        if self.config.batch:
            self.start()
        else:
            self.flush()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def start(self) -> bool:
        """Start the periodic flush; no-op if already running"""
        return self._timer.start()

    def stop(self) -> bool:
        """Stop the periodic flush; no-op if already stopped"""
        return self._timer.stop()

    def _take(self) -> List[Dict[str, Any]]:
        """Remove the next payload: the whole queue when batching, otherwise one record"""
        with self._lock:
            if not self._queue:
                return []
            if self.config.batch:
                payload, self._queue = self._queue, []
            else:
                payload = [self._queue.pop(0)]
            return payload

    def flush(self) -> None:
        """Send queued records, or wake the delivery worker"""
        if not self.config.url:
            return
        if self.config.synchronous:
            payload = self._take()
            if payload:
                self._send_batch(payload)
            return
        self._schedule_drain()

    def _schedule_drain(self) -> None:
        with self._lock:
            if self._draining or self.closed or not self._queue:
                return
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="logroute-http")
            self._draining = True
            executor = self._executor
        executor.submit(self._drain)

    def _drain(self) -> None:
        """Worker loop: send payloads until the queue is empty"""
        try:
            while True:
                payload = self._take()
                if payload:
                    self._send_batch(payload)
                    if not self.config.batch:
                        continue
                with self._lock:
                    if self.config.batch or not self._queue:
                        self._draining = False
                        return
        except Exception:
            with self._lock:
                self._draining = False
            logger.warning("HTTP delivery worker failed", exc_info=True)

    def _prepare_request(self, data: bytes) -> urllib.request.Request:
        headers = {
            "User-Agent": self.config.user_agent,
            "Content-Length": str(len(data)),
        }
        headers.update(self.config.headers)
        headers.update(self.auth_headers)
        return urllib.request.Request(
            self.config.url, data=data, headers=headers, method=self.config.method
        )

    def _execute_http_request(self, request: urllib.request.Request) -> None:
        """Execute HTTP request and handle response"""
        with urllib.request.urlopen(request, timeout=self.config.timeout) as response:
            if response.status >= 400:
                raise HTTPError(
                    self.config.url,
                    response.status,
                    f"HTTP {response.status}",
                    response.headers,
                    None,
                )

    def _send_batch(self, payload: List[Dict[str, Any]]) -> bool:
        """Serialize and send one payload with retries"""
        try:
            data = json.dumps(payload, default=str).encode("utf-8")
        except (TypeError, ValueError):
            logger.debug("Dropping unserializable payload", exc_info=True)
            return False

        for attempt in range(self.config.max_retries + 1):
            try:
                self._execute_http_request(self._prepare_request(data))
                return True
            except Exception:
                if attempt < self.config.max_retries:
                    time.sleep(self.config.retry_delay * (2**attempt))
                else:
                    logger.warning(
                        "Giving up delivering %d record(s) to %s",
                        len(payload),
                        self.config.url,
                        exc_info=True,
                    )
        return False

    def close(self) -> None:
        """Stop the timer, deliver what is queued and release the worker"""
        with self._lock:
            if self.closed:
                return
            self.closed = True
            executor, self._executor = self._executor, None
        self.stop()
        if executor is not None:
            executor.shutdown(wait=True)
        with self._lock:
            remaining, self._queue = self._queue, []
        if remaining and self.config.url:
            if self.config.batch:
                self._send_batch(remaining)
            else:
                for item in remaining:
                    self._send_batch([item])

    dispose = close


def create_http_transport(url: str, **options: Any) -> HTTPTransport:
    """Create an HTTP transport for the given endpoint"""
    return HTTPTransport(HTTPTransportConfig(url=url, **options))
