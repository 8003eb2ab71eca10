from __future__ import annotations

import stat

import pytest

from netbird_edgeos.errors import ConfigMissingError, InvalidManagementUrlError
from netbird_edgeos.installer_config import (
    load_installer_config,
    parse_key_values,
    validate_management_url,
    write_installer_config,
)


def test_parse_key_values():
    text = """
# written by setup
SELF_HOSTED_MANAGEMENT_URL="https://nb.example.net"
export OTHER='single quoted'
BARE=value=with=equals

not a pair
"""
    assert parse_key_values(text) == {
        "SELF_HOSTED_MANAGEMENT_URL": "https://nb.example.net",
        "OTHER": "single quoted",
        "BARE": "value=with=equals",
    }


def test_write_then_load(tmp_path):
    path = tmp_path / "netbird" / "installer.conf"

    write_installer_config(path, "https://nb.example.net:33073")

    assert load_installer_config(path).management_url == "https://nb.example.net:33073"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert 'SELF_HOSTED_MANAGEMENT_URL="https://nb.example.net:33073"' in path.read_text()


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigMissingError, match="not found"):
        load_installer_config(tmp_path / "installer.conf")


def test_load_without_url(tmp_path):
    path = tmp_path / "installer.conf"
    path.write_text("# nothing here\n")

    with pytest.raises(ConfigMissingError, match="SELF_HOSTED_MANAGEMENT_URL"):
        load_installer_config(path)


@pytest.mark.parametrize(
    "url",
    [
        None,
        "",
        "   ",
        "https://netbird.yourdomain.com",
        "https://netbird.yourdomain.com/",
        "netbird.example.net",
        "ftp://netbird.example.net",
        'https://nb.example.net/"; rm -rf /',
    ],
)
def test_invalid_urls(url):
    with pytest.raises(InvalidManagementUrlError):
        validate_management_url(url)


def test_valid_url_is_stripped():
    assert validate_management_url("  https://nb.example.net \n") == "https://nb.example.net"
