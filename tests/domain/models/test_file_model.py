import pytest
from app.domain.models.file import (
    File,
    FileType,
    ThumbnailJob,
    is_root_parent,
    parse_file_id,
)
from pydantic import ValidationError


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1", "1"),
        (42, "42"),
        (" 7 ", "7"),
        ("0", None),
        ("007", None),
        ("-1", None),
        ("abc", None),
        ("12345678901234567890", None),
        ("9223372036854775807", "9223372036854775807"),
        ("9223372036854775808", None),
        ("9999999999999999999", None),
        (None, None),
        (True, None),
    ],
)
def test_parse_file_id(value, expected) -> None:
    assert parse_file_id(value) == expected


@pytest.mark.parametrize("value", [None, 0, "0", "", " 0 "])
def test_root_parent_sentinels(value) -> None:
    assert is_root_parent(value) is True


@pytest.mark.parametrize("value", ["1", 5, "abc"])
def test_non_root_parent(value) -> None:
    assert is_root_parent(value) is False


def test_folder_must_not_have_content_path() -> None:
    with pytest.raises(ValidationError):
        File(user_id="u", name="docs", type=FileType.FOLDER, local_path="key")


@pytest.mark.parametrize("file_type", [FileType.FILE, FileType.IMAGE])
def test_file_and_image_require_content_path(file_type) -> None:
    with pytest.raises(ValidationError):
        File(user_id="u", name="a", type=file_type)


def test_file_name_must_not_be_empty() -> None:
    with pytest.raises(ValidationError):
        File(user_id="u", name="", type=FileType.FOLDER)


def test_file_defaults() -> None:
    folder = File(user_id="u", name="docs", type="folder")

    assert folder.is_public is False
    assert folder.is_root is True
    assert folder.is_folder is True
    assert folder.is_owned_by("u") is True
    assert folder.is_owned_by(None) is False


def test_thumbnail_job_message_uses_wire_names() -> None:
    job = ThumbnailJob(file_id="3", owner_id="u1")

    assert job.to_message() == '{"fileId":"3","ownerId":"u1"}'
    assert ThumbnailJob.model_validate({"fileId": "3", "userId": "u1"}).owner_id == "u1"
