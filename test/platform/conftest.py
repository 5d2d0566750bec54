import pytest


@pytest.fixture(autouse=True)
def clean_database():
    """Platform tests never touch the database"""
    yield
