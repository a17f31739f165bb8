"""
Unit tests for the role map compiler.
"""

import pytest

from rail_hrbac.rbac import ConfigError, Permission, compile_roles

pytestmark = pytest.mark.unit


async def _when(params):
    return True


async def _filter(params):
    return {"owner": params.get("user_id")}


def test_string_entries_are_routed_by_wildcard():
    roles = compile_roles({"reader": {"can": ["article:read", "comment:*"]}})

    reader = roles["reader"]
    assert set(reader.exact) == {"article:read"}
    assert [entry.name for entry in reader.wildcards] == ["comment:*"]
    assert reader.exact["article:read"].is_unconditional
    assert reader.inherits == ()


def test_object_entries_keep_callables_and_leave_absent_ones_empty():
    roles = compile_roles(
        {
            "reader": {
                "can": [
                    {"name": "article:list", "filter": _filter},
                    {"name": "article:*", "when": _when},
                ]
            }
        }
    )

    entry = roles["reader"].exact["article:list"]
    assert entry.filter is _filter
    assert entry.when is None
    assert entry.project is None
    assert roles["reader"].wildcards[0].when is _when


def test_permission_dataclass_is_accepted():
    roles = compile_roles({"reader": {"can": [Permission(name="article:list", filter=_filter)]}})

    assert roles["reader"].exact["article:list"].filter is _filter


def test_later_exact_entries_overwrite_earlier_ones():
    roles = compile_roles(
        {"reader": {"can": [{"name": "article:list", "filter": _filter}, "article:list"]}}
    )

    assert roles["reader"].exact["article:list"].filter is None


def test_wildcards_keep_declaration_order():
    roles = compile_roles({"reader": {"can": ["a:*", "a:b:*", "*"]}})

    assert [entry.name for entry in roles["reader"].wildcards] == ["a:*", "a:b:*", "*"]


def test_inherits_are_kept_in_order():
    roles = compile_roles(
        {
            "a": {"can": []},
            "b": {"can": []},
            "c": {"can": [], "inherits": ["b", "a"]},
        }
    )

    assert roles["c"].inherits == ("b", "a")


def test_compiled_map_is_read_only():
    roles = compile_roles({"reader": {"can": ["article:read"]}})

    with pytest.raises(TypeError):
        roles["writer"] = roles["reader"]
    with pytest.raises(TypeError):
        roles["reader"].exact["article:write"] = roles["reader"].exact["article:read"]


@pytest.mark.parametrize(
    "config",
    [
        ["reader"],
        "reader",
        None,
        {"reader": ["article:read"]},
        {"reader": {"can": "article:read"}},
        {"reader": {}},
        {"reader": {"can": [], "inherits": "writer"}},
        {"reader": {"can": [], "inherits": ["writer"]}},
        {"reader": {"can": [], "inherits": [1]}},
        {"reader": {"can": [42]}},
        {"reader": {"can": [{"when": _when}]}},
        {"reader": {"can": [{"name": ""}]}},
        {"reader": {"can": [{"name": "article:list", "filter": "not callable"}]}},
        {"reader": {"can": [{"name": "article:list", "when": True}]}},
        {"reader": {"can": [{"name": "article:list", "project": {"title": True}}]}},
    ],
)
def test_malformed_configuration_raises_config_error(config):
    with pytest.raises(ConfigError):
        compile_roles(config)


def test_undefined_inheritance_names_the_role():
    with pytest.raises(ConfigError, match="Undefined inheritance role: writer") as excinfo:
        compile_roles({"reader": {"can": [], "inherits": ["writer"]}})

    assert excinfo.value.role == "reader"


def test_config_error_is_a_type_error():
    with pytest.raises(TypeError):
        compile_roles(["reader"])
