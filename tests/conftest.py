"""Shared fixtures for the whoami test suite."""

import pytest
from flask import Flask
from flask.testing import FlaskClient

from whoami.app import create_app
from whoami.config import Config


@pytest.fixture
def config() -> Config:
    return Config(port=8080, name="test-server", verbose=False)


@pytest.fixture
def app(config: Config) -> Flask:
    app = create_app(config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()
