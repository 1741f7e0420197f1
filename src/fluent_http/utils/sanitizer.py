# src/fluent_http/utils/sanitizer.py
"""
Маскирование чувствительных данных перед логированием.

Защищает токены (Authorization: Bearer ...), пароли и ключи API от
попадания в логи.
"""

import re
from typing import Any, Dict, Mapping

MASK = "***REDACTED***"

# Чувствительные ключи (case-insensitive)
SENSITIVE_KEYS = frozenset({
    'password', 'passwd', 'pwd',
    'token', 'access_token', 'refresh_token', 'auth_token', 'id_token',
    'secret', 'client_secret', 'api_key', 'apikey',
    'authorization', 'proxy-authorization', 'cookie', 'set-cookie',
    'x-api-key',
})

# (pattern, replacement) для значений внутри строк
SENSITIVE_PATTERNS = [
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + MASK),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + MASK),
    (re.compile(r'((?:api[_-]?key|token|password)=)([^\s&,;]+)', re.IGNORECASE), r'\1' + MASK),
]


def is_sensitive_key(key: Any) -> bool:
    return str(key).lower() in SENSITIVE_KEYS


def mask_sensitive_data(data: Any, mask: str = MASK) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "Accept": "*/*"})
        {'Authorization': '***REDACTED***', 'Accept': '*/*'}

        >>> mask_sensitive_data("https://h/api?token=abc&page=1")
        'https://h/api?token=***REDACTED***&page=1'
    """
    if isinstance(data, str):
        for pattern, replacement in SENSITIVE_PATTERNS:
            data = pattern.sub(replacement.replace(MASK, mask), data)
        return data

    if isinstance(data, Mapping):
        return {
            key: mask if is_sensitive_key(key) else mask_sensitive_data(value, mask)
            for key, value in data.items()
        }

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    # None, числа и прочие объекты возвращаем как есть
    return data


def mask_headers(headers: Mapping[str, str], mask: str = MASK) -> Dict[str, str]:
    """Копия заголовков с замаскированными значениями чувствительных полей."""
    return {key: mask if is_sensitive_key(key) else value for key, value in headers.items()}
