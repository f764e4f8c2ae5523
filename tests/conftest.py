import pytest

from mygit.models import ObjectStore, Repository


@pytest.fixture
def repository(tmp_path):
    repository = Repository.at(tmp_path)
    repository.init()
    return repository


@pytest.fixture
def store(repository):
    return ObjectStore(repository)
