"""
Unit tests for the settings-driven engine registry.
"""

import pytest
from django.test.utils import override_settings

from rail_hrbac.config_proxy import clear_runtime_settings, configure_runtime_settings
from rail_hrbac.rbac import ConfigError, EngineOptions
from rail_hrbac.registry import get_engine, reset_engine
from tests import rbac_fixtures

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _fresh_engine():
    clear_runtime_settings()
    reset_engine()
    yield
    clear_runtime_settings()
    reset_engine()


def test_get_engine_is_shared_until_reset():
    engine = get_engine()

    assert get_engine() is engine
    reset_engine()
    assert get_engine() is not engine


def test_engine_roles_are_loaded_lazily():
    engine = get_engine()

    assert engine.is_ready is False
    assert engine.options.merge_filters is rbac_fixtures.merge_with_or


@pytest.mark.asyncio
async def test_engine_resolves_settings_and_app_file_roles():
    engine = get_engine()

    decision = await engine.can("editor", "article:list", {"sub": False})
    assert decision.as_dict() == {
        "permission": True,
        "filter": {"premium": {"$in": [None, False]}},
    }

    audit = await engine.can("auditor", "audit:export")
    assert audit.permission is True

    combined = await engine.can(["reader", "auditor"], "article:list", {"sub": False})
    assert combined.as_dict() == {
        "permission": True,
        "filter": {"premium": {"$in": [None, False]}},
        "project": {"title": True, "summary": True},
    }


@pytest.mark.asyncio
async def test_engine_uses_merge_reducer_from_settings():
    configure_runtime_settings(
        roles={
            "a": {"can": [{"name": "op", "filter": "tests.rbac_fixtures.free_articles_filter"}]},
            "b": {"can": [{"name": "op", "filter": "tests.rbac_fixtures.free_articles_filter"}]},
        },
        load_app_role_files=False,
    )
    engine = get_engine()

    decision = await engine.can(["a", "b"], "op")

    expected = {"premium": {"$in": [None, False]}}
    assert decision.filter == {"$or": [expected, expected]}


def test_options_from_settings_accept_callables():
    configure_runtime_settings(options={"global_when": rbac_fixtures.only_owner})

    options = EngineOptions.from_settings()

    assert options.global_when is rbac_fixtures.only_owner
    assert options.merge_filters is None


@override_settings(RAIL_HRBAC={"options": {"global_filter": "tests.rbac_fixtures.missing"}})
def test_unloadable_option_raises_config_error():
    with pytest.raises(ConfigError) as excinfo:
        get_engine()

    assert excinfo.value.option == "global_filter"


def test_package_version_comes_from_defaults():
    import rail_hrbac
    from rail_hrbac.defaults import LIBRARY_VERSION

    assert rail_hrbac.__version__ == LIBRARY_VERSION
