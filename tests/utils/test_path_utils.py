# tests/utils/test_path_utils.py
import pytest

from src.services.exceptions import ConfigurationError
from src.utils.path_utils import (
    access_path,
    clone_file_path,
    derive_clone_name,
    normalize_destination,
    random_suffix,
    to_local_path,
)


@pytest.mark.parametrize("destination, expected", [
    ("D:\\clones\\", "D:\\clones"),
    ("D:\\clones", "D:\\clones"),
    ("D:\\clones\\\\", "D:\\clones"),
    ("D:\\", "D:\\"),
    ("D:", "D:\\"),
])
def test_normalize_destination(destination, expected):
    assert normalize_destination(destination) == expected


@pytest.mark.parametrize("path, expected", [
    (r"\\host1\d$\clones", r"D:\clones"),
    ("\\\\host1\\d$\\clones\\", r"D:\clones"),
    (r"\\host1\e$", "E:\\"),
    ("//host1/d$/clones", r"D:\clones"),
    (r"D:\clones", r"D:\clones"),
])
def test_to_local_path(path, expected):
    assert to_local_path(path) == expected


def test_to_local_path_rejects_plain_share():
    with pytest.raises(ConfigurationError):
        to_local_path(r"\\fileserver\share\clones")


@pytest.mark.parametrize("location, expected", [
    (r"C:\images\DB1_20180101.img", "DB1"),
    (r"C:\images\DB1_20180101101500.vhdx", "DB1"),
    (r"C:\images\Sales_Archive.vhdx", "Sales_Archive"),
    (r"C:\images\Plain.vhdx", "Plain"),
    (r"C:\images\20180101.vhdx", "20180101"),
])
def test_derive_clone_name(location, expected):
    assert derive_clone_name(location) == expected


def test_clone_paths():
    assert clone_file_path("D:\\clones", "DB1", ".vhdx") == r"D:\clones\DB1.vhdx"
    assert access_path("D:\\clones", "DB1", "abcd") == r"D:\clones\DB1_abcd"


def test_random_suffix_is_alphanumeric_and_unique():
    suffixes = {random_suffix(8) for _ in range(200)}

    assert len(suffixes) == 200
    assert all(len(s) == 8 and s.isalnum() for s in suffixes)
