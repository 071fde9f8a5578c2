"""Page request normalization shared by list use cases."""

from dataclasses import dataclass

from entitystore.core.constants import DEFAULT_PAGE_SIZE, MAX_ENTITY_ID, MAX_PAGE_SIZE


@dataclass(frozen=True)
class PageRequest:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def normalize_page(
    page: int | None,
    page_size: int | None,
    *,
    default_size: int = DEFAULT_PAGE_SIZE,
    max_size: int = MAX_PAGE_SIZE,
) -> PageRequest:
    """Clamp raw query values: page < 1 -> 1, size < 1 -> default, size > max -> max.

    The page is also capped so the row offset fits a BIGINT; pages past that
    point are empty anyway.
    """
    page = page if page is not None and page >= 1 else 1
    if page_size is None or page_size < 1:
        page_size = default_size
    elif page_size > max_size:
        page_size = max_size
    page = min(page, MAX_ENTITY_ID // page_size + 1)
    return PageRequest(page=page, page_size=page_size)


@dataclass(frozen=True)
class PageResult[T]:
    items: list[T]
    total: int
    page: int
    page_size: int
