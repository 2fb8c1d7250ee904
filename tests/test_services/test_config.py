import pytest
from pydantic import ValidationError

from thumbnail_service.config import Settings, ThumbnailConfig


def make_config(**overrides):
    values = {
        "max_height": 200,
        "jpeg_quality": 80,
        "allowed_mime_types": ("image/jpeg",),
        "thumbnail_path_public": "public/thumbnails",
        "thumbnail_path_private": "users/{user}/thumbnails",
    }
    values.update(overrides)
    return ThumbnailConfig(**values)


@pytest.mark.parametrize("field, value", [
    ("max_height", 0),
    ("max_height", 2049),
    ("jpeg_quality", 0),
    ("jpeg_quality", 101),
    ("allowed_mime_types", ()),
    ("thumbnail_path_public", ""),
    ("thumbnail_path_private", "users/thumbnails"),
])
def test_invalid_thumbnail_config_is_rejected(field, value):
    with pytest.raises(ValidationError):
        make_config(**{field: value})


def test_thumbnail_config_is_immutable():
    config = make_config()

    with pytest.raises(ValidationError):
        config.max_height = 10


def test_private_thumbnail_dir_substitutes_user():
    assert make_config().private_thumbnail_dir("alice") == "users/alice/thumbnails"


def test_settings_require_connection_string_outside_dev_mode(monkeypatch):
    monkeypatch.delenv("STORAGE_CONNECTION_STRING", raising=False)

    with pytest.raises(ValidationError):
        Settings(DEV_MODE=False, _env_file=None)

    settings = Settings(DEV_MODE=False, STORAGE_CONNECTION_STRING="UseDevelopmentStorage=true", _env_file=None)
    config = ThumbnailConfig.from_settings(settings)
    assert config.connection_string == "UseDevelopmentStorage=true"
    assert config.max_height == settings.THUMBNAIL_MAX_HEIGHT
