"""
Shared fixtures for the Quality Master test suite.

Qt runs with the offscreen platform so tests work without a display.
"""

import os

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

import pytest
from PyQt6.QtWidgets import QApplication

from quality_master.services.form_controller import FormController
from quality_master.services.form_store import FormStateStore


@pytest.fixture(scope='session', autouse=True)
def qapp():
    """Single QApplication for the whole test session"""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def store_path(tmp_path_factory):
    return tmp_path_factory.mktemp('store') / 'form_state.db'


@pytest.fixture
def store(store_path):
    form_store = FormStateStore(store_path)
    yield form_store
    form_store.close()


@pytest.fixture
def controller(store):
    return FormController(store)
