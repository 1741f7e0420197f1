"""
Система конфигурации для fluent-http-client.

Все конфиги immutable (frozen dataclasses) - один контекст разделяется
между потоками.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Tuple, Union

if TYPE_CHECKING:
    from .logging import LoggingConfig

DEFAULT_CONTENT_TYPE = "application/json"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Таймауты одного запроса в секундах.

    ``read`` ограничивает паузу между чанками ответа, а не всё чтение
    (для stream() это важно).

    Examples:
        >>> TimeoutConfig.of(10)
        TimeoutConfig(connect=5, read=10)
    """
    connect: float = 5
    read: float = 30

    def __post_init__(self):
        for name in ("connect", "read"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        return self.connect, self.read

    @classmethod
    def of(cls, timeout: Union[float, Tuple[float, float], "TimeoutConfig"]) -> "TimeoutConfig":
        """Нормализовать int/float/(connect, read)/TimeoutConfig."""
        if isinstance(timeout, TimeoutConfig):
            return timeout
        if isinstance(timeout, tuple):
            return cls(connect=timeout[0], read=timeout[1])
        return cls(connect=min(5, timeout), read=timeout)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONNECTION POOL CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ConnectionPoolConfig:
    """Параметры HTTPAdapter, монтируемого в сессию каждого потока."""
    pool_connections: int = 10
    pool_maxsize: int = 10
    pool_block: bool = False

    def __post_init__(self):
        for name in ("pool_connections", "pool_maxsize"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SECURITY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class SecurityConfig:
    """TLS verification and redirect policy, applied to every session."""
    verify_ssl: bool = True
    allow_redirects: bool = True

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class HttpClientConfig:
    """
    Главная конфигурация HttpClientContext.

    Args:
        base_url: Базовый URL (опционально, можно задать в запросе через url())
        headers: Заголовки для каждого запроса
        default_content_type: Content-Type для тела без явного content_type()
        timeout: Таймауты по умолчанию (запрос может переопределить)
        pool: Пул соединений (см. ConnectionPoolConfig)
        security: verify_ssl / allow_redirects
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> config = HttpClientConfig(base_url="https://api.example.com")
        >>> config = HttpClientConfig.create(base_url="http://h/api", timeout=60)
    """
    base_url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    default_content_type: str = DEFAULT_CONTENT_TYPE

    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    pool: ConnectionPoolConfig = field(default_factory=ConnectionPoolConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    logging: Optional["LoggingConfig"] = None

    def __post_init__(self):
        """Normalize base_url and freeze mutable dicts."""
        if isinstance(self.headers, dict):
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

        if self.base_url:
            normalized = self.base_url.rstrip("/")
            if normalized != self.base_url:
                object.__setattr__(self, "base_url", normalized)

        if not self.default_content_type:
            raise ValueError("default_content_type must not be empty")

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 30,
        verify_ssl: bool = True,
        headers: Optional[Dict[str, str]] = None,
        default_content_type: str = DEFAULT_CONTENT_TYPE,
        pool_maxsize: Optional[int] = None,
        logging: Optional["LoggingConfig"] = None,
    ) -> "HttpClientConfig":
        """
        Удобный конструктор конфигурации.

        Examples:
            >>> config = HttpClientConfig.create(timeout=60)
            >>> config = HttpClientConfig.create(timeout=(5, 60), verify_ssl=False)
        """
        pool_cfg = ConnectionPoolConfig(pool_maxsize=pool_maxsize) if pool_maxsize else ConnectionPoolConfig()

        return cls(
            base_url=base_url,
            headers=headers or {},
            default_content_type=default_content_type,
            timeout=TimeoutConfig.of(timeout),
            pool=pool_cfg,
            security=SecurityConfig(verify_ssl=verify_ssl),
            logging=logging,
        )

    def with_base_url(self, base_url: Optional[str]) -> "HttpClientConfig":
        """Создать новый конфиг с другим base_url."""
        return replace(self, base_url=base_url)

    def with_timeout(self, timeout: Union[float, Tuple[float, float], TimeoutConfig]) -> "HttpClientConfig":
        """
        Создать новый конфиг с изменённым timeout.

        Example:
            >>> new_config = config.with_timeout(60)
        """
        return replace(self, timeout=TimeoutConfig.of(timeout))

    def with_headers(self, headers: Dict[str, str]) -> "HttpClientConfig":
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)
