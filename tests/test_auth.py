import pytest

from clawkit.auth import ApiKeyStore, Unauthorized, load_api_keys


def make_headers(key=None):
    return {} if key is None else {"authorization": f"Bearer {key}"}


def test_open_mode_when_no_file(tmp_path):
    store = load_api_keys(tmp_path / "nonexistent")
    assert not store.enabled()
    assert store.authenticate(make_headers()).tenant == "open"


def test_open_mode_still_ok_with_any_header(tmp_path):
    store = load_api_keys(tmp_path)
    info = store.authenticate(make_headers("token"))
    assert info.tenant == "open"
    assert info.allowed_apps == []


def test_empty_store_is_not_enabled():
    assert not ApiKeyStore({}).enabled()


def test_authenticate_with_valid_key():
    store = ApiKeyStore({"token": ("acme", ["app-a", "app-b"])})
    assert store.enabled()
    info = store.authenticate(make_headers("token"))
    assert info.tenant == "acme"
    assert info.allowed_apps == ["app-a", "app-b"]


def test_authenticate_with_wrong_key_raises():
    store = ApiKeyStore({"token": ("acme", [])})
    with pytest.raises(Unauthorized):
        store.authenticate(make_headers("secret"))


def test_authenticate_missing_header_raises():
    store = ApiKeyStore({"token": ("acme", [])})
    with pytest.raises(Unauthorized):
        store.authenticate(make_headers())


def test_authenticate_wrong_scheme_raises():
    store = ApiKeyStore({"token": ("acme", [])})
    with pytest.raises(Unauthorized):
        store.authenticate({"authorization": "Basic token"})


def test_header_name_is_case_insensitive():
    store = ApiKeyStore({"token": ("acme", [])})
    assert store.authenticate({"Authorization": "Bearer token"}).tenant == "acme"


def test_load_from_yaml(tmp_path):
    (tmp_path / "api_keys.yaml").write_text(
        "- key: token\n"
        "  tenant: acme\n"
        "  apps:\n"
        "    - id: app-a\n"
        "- key: secret\n"
        "  tenant: beta\n",
        encoding="utf-8",
    )
    store = load_api_keys(tmp_path)
    assert store.enabled()
    assert store.authenticate(make_headers("token")).allowed_apps == ["app-a"]
    assert store.authenticate(make_headers("secret")).tenant == "beta"
    assert store.authenticate(make_headers("secret")).allowed_apps == []


def test_malformed_yaml_falls_back_to_open(tmp_path):
    (tmp_path / "api_keys.yaml").write_text("key: [unclosed", encoding="utf-8")
    store = load_api_keys(tmp_path)
    assert not store.enabled()


def test_wrong_shape_falls_back_to_open(tmp_path):
    (tmp_path / "api_keys.yaml").write_text("- tenant: acme\n", encoding="utf-8")
    assert not load_api_keys(tmp_path).enabled()