"""Tests for workspace path management and run ids."""

import pytest

from recsplit.core import config, paths
from recsplit.core.artifacts import new_run_id

pytestmark = pytest.mark.unit


def test_paths_default_values(isolated_settings):
    assert paths.workdir().name == "var"
    assert paths.logs().name == "logs"
    assert paths.logs().parent == paths.workdir()


def test_workdir_follows_settings(isolated_settings, monkeypatch):
    monkeypatch.setattr(config, "SETTINGS", config.Settings(RECSPLIT_WORKDIR="custom_var"))
    assert paths.workdir().name == "custom_var"
    assert paths.logs().parent.name == "custom_var"


def test_run_id_shape():
    rid = new_run_id()
    assert "_" in rid and len(rid.split("_")[-1]) == 4
