"""Типізовані відмови побудови оболонки та мінімальної коробки."""


class DegenerateResultError(ValueError):
    """Вироджений вхід або вироджений проміжний результат."""


class InsufficientPointsError(DegenerateResultError):
    """Менше 4 точок (до або після фільтра Акла–Туссена)."""


class DegenerateGeometryError(DegenerateResultError):
    """Усі точки збігаються, колінеарні або копланарні."""


class SingularSystemError(DegenerateResultError):
    """Лінійна система 3x3 для вершини коробки не має єдиного розв'язку."""


class NoSeparatingTripleError(DegenerateResultError):
    """Пошук трійки граней не знайшов жодної з ненульовим потрійним добутком."""
