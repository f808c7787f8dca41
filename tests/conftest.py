"""Shared fixtures for zipmeta_arrow tests."""

import zipfile

import pytest


@pytest.fixture
def make_zip(tmp_path):
    """Factory writing a ZIP file from (ZipInfo or name, data) pairs."""

    def _make_zip(members, name="test.zip", comment=b""):
        zip_path = tmp_path / name
        with zipfile.ZipFile(zip_path, 'w') as zf:
            for member, data in members:
                zf.writestr(member, data)
            zf.comment = comment
        return zip_path

    return _make_zip
