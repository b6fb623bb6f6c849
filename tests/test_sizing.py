from pathlib import Path

import pytest

from repcon.sizing import GIGABYTE, MEGABYTE, SizeLimitExceededError, check_size_limits, format_file_size, get_dir_size


def test_dir_size_sums_selected_files(make_repo) -> None:
    root = make_repo({"test_file.txt": "Hello World!\n", "test_file2.txt": "Another file content!\n"})

    assert get_dir_size(root, [Path("test_file.txt"), Path("test_file2.txt")]) == 13 + 22
    assert get_dir_size(root, [Path("test_file.txt")]) == 13
    assert get_dir_size(root, []) == 0


def test_dir_size_ignores_missing_files(make_repo) -> None:
    root = make_repo({"present.txt": "12345"})

    assert get_dir_size(root, [Path("present.txt"), Path("missing.txt")]) == 5


def test_check_size_limits_allows_equal_total() -> None:
    check_size_limits(100, 100)


def test_check_size_limits_raises_when_exceeded() -> None:
    with pytest.raises(SizeLimitExceededError) as excinfo:
        check_size_limits(2048, 1000)

    assert excinfo.value.total_size == 2048
    assert excinfo.value.allowed_size == 1000
    assert "2.00 KB" in str(excinfo.value)


@pytest.mark.parametrize(
    ("size", "expected"),
    (
        (0, "0 B"),
        (1023, "1023 B"),
        (1536, "1.50 KB"),
        (2 * MEGABYTE, "2.00 MB"),
        (GIGABYTE, "1.00 GB"),
    ),
)
def test_format_file_size(size: int, expected: str) -> None:
    assert format_file_size(size) == expected
