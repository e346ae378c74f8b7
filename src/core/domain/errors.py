"""
Ошибки механизма.

- InvalidInputError: невалидный вход (пустая выборка, отрицательные
  количества, параметры вне [0, 1]). Всегда сообщается вызывающему,
  никогда не подменяется значением по умолчанию.
- BoundaryUndefinedError: бисекция на вырожденном распределении
  (min == max), корни virtual value не определены.
- StaleEpochError: публикация снапшота с epoch, не превышающим текущий.

Деление на ноль ошибкой не является: safe_divide / mul_div возвращают
документированный fallback.
"""


class InvalidInputError(ValueError):
    """Невалидный вход вызова. Вызов терминален, повтор — решение вызывающего."""

    pass


class BoundaryUndefinedError(Exception):
    """Корни virtual value не определены для вырожденного распределения."""

    pass


class StaleEpochError(ValueError):
    """Epoch публикуемого снапшота не монотонен."""

    pass
