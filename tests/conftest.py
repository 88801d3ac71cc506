import pytest

from inspection_core.src.catalog import ChecklistCatalog, load_catalog


@pytest.fixture
def catalog() -> ChecklistCatalog:
    return load_catalog()
