# src/fluent_http/plugins/metrics_plugin.py

import threading
from collections import deque
from typing import Any, Deque, Dict, List, Optional
from urllib.parse import urlparse

from .plugin import RequestEvent, RequestListener


class MetricsListener(RequestListener):
    """
    Слушатель, собирающий метрики запросов.

    Отслеживает:
    - Общее количество запросов и неудачных запросов
    - Время ответа (среднее, мин, макс)
    - Статистику по методам HTTP и статус кодам
    - Историю последних запросов

    Неудачные запросы (статус >= 300 и сбои транспорта со статусом 499)
    тоже учитываются: listener вызывается для каждого запроса.

    Example:
        >>> metrics = MetricsListener()
        >>> ctx = HttpClientContext(base_url="https://api.example.com", listeners=[metrics])
        >>> ctx.request().path("users").get().as_string()
        >>> metrics.get_metrics()["total_requests"]
        1
    """

    def __init__(self, history_size: int = 100):
        """
        Args:
            history_size: Максимальный размер истории запросов
        """
        self._lock = threading.Lock()
        self._history_size = history_size
        self._reset_state()

    def _reset_state(self) -> None:
        self._total_requests = 0
        self._failed_requests = 0
        self._total_duration_ms = 0.0
        self._min_duration_ms: Optional[float] = None
        self._max_duration_ms = 0.0
        self._method_stats: Dict[str, int] = {}
        self._status_code_stats: Dict[int, int] = {}
        self._history: Deque[Dict[str, Any]] = deque(maxlen=self._history_size)

    def response(self, event: RequestEvent) -> None:
        with self._lock:
            self._total_requests += 1
            if not event.is_success:
                self._failed_requests += 1

            duration = event.duration_ms
            self._total_duration_ms += duration
            if self._min_duration_ms is None or duration < self._min_duration_ms:
                self._min_duration_ms = duration
            self._max_duration_ms = max(self._max_duration_ms, duration)

            self._method_stats[event.method] = self._method_stats.get(event.method, 0) + 1
            self._status_code_stats[event.status_code] = self._status_code_stats.get(event.status_code, 0) + 1

            self._history.append({
                'method': event.method,
                'endpoint': urlparse(event.url).path or '/',
                'status_code': event.status_code,
                'duration_ms': duration,
                'success': event.is_success,
            })

    def get_metrics(self) -> Dict[str, Any]:
        """
        Возвращает собранные метрики.

        Returns:
            Словарь: total_requests, failed_requests, success_rate (0-100),
            avg/min/max_duration_ms, method_stats, status_code_stats
        """
        with self._lock:
            total = self._total_requests
            success_rate = (total - self._failed_requests) / total * 100 if total else 0.0
            avg = self._total_duration_ms / total if total else 0.0

            return {
                'total_requests': total,
                'failed_requests': self._failed_requests,
                'success_rate': round(success_rate, 2),
                'avg_duration_ms': round(avg, 2),
                'min_duration_ms': self._min_duration_ms or 0.0,
                'max_duration_ms': self._max_duration_ms,
                'method_stats': dict(self._method_stats),
                'status_code_stats': dict(self._status_code_stats),
            }

    def get_request_history(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        with self._lock:
            history = list(self._history)
        return history if limit is None else history[-limit:]

    def reset(self) -> None:
        """Сбрасывает все метрики и историю."""
        with self._lock:
            self._reset_state()

    def __repr__(self) -> str:
        metrics = self.get_metrics()
        return (
            f"MetricsListener(total={metrics['total_requests']}, "
            f"failed={metrics['failed_requests']})"
        )
