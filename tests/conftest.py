import pytest
from fastapi.testclient import TestClient

from hospital_care.chatbot.engine import ChatEngine, ResponseGenerator
from hospital_care.data.directory import SEED_DOCTORS, DirectoryError, InMemoryDirectory
from hospital_care.service.api import create_app


class BrokenDirectory:
    name = "broken"

    def list_all(self):
        raise DirectoryError("connection refused")

    def by_specialty(self, substring):
        raise DirectoryError("connection refused")


@pytest.fixture
def directory():
    return InMemoryDirectory(SEED_DOCTORS)


@pytest.fixture
def empty_directory():
    return InMemoryDirectory([])


@pytest.fixture
def broken_directory():
    return BrokenDirectory()


@pytest.fixture
def generator(directory):
    return ResponseGenerator(directory)


@pytest.fixture
def engine(directory):
    return ChatEngine(directory)


@pytest.fixture
def client(directory):
    with TestClient(create_app(directory)) as c:
        yield c
