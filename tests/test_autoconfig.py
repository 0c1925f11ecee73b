from apiflow.autoconfig import AutoConfig, AutoConfigVar


def test_empty_var_omits_everything():
    assert AutoConfigVar().to_dict() == {}


def test_var_keeps_set_fields():
    var = AutoConfigVar(description="Region", example="us", default="us", enum=["us", "eu"], exclude=True)
    assert var.to_dict() == {
        "description": "Region",
        "example": "us",
        "default": "us",
        "enum": ["us", "eu"],
        "exclude": True,
    }


def test_var_falsy_default_kept_but_none_dropped():
    assert AutoConfigVar(default=0).to_dict() == {"default": 0}
    assert "default" not in AutoConfigVar(default=None).to_dict()


def test_empty_config_keeps_required_keys():
    data = AutoConfig().to_dict()
    assert set(data) == {"security", "params"}
    assert data["params"] == {}


def test_config_nests_prompt_vars():
    config = AutoConfig(
        security="oauth",
        headers={"X-Id": "{client_id}"},
        prompt={"client_id": AutoConfigVar(description="Client ID")},
        params={"client_id": "{client_id}"},
    )
    data = config.to_dict()
    assert data["security"] == "oauth"
    assert data["headers"] == {"X-Id": "{client_id}"}
    assert data["prompt"] == {"client_id": {"description": "Client ID"}}
    assert data["params"] == {"client_id": "{client_id}"}


def test_to_dict_returns_copies():
    config = AutoConfig(params={"a": "b"})
    data = config.to_dict()
    data["params"]["c"] = "d"
    assert config.params == {"a": "b"}