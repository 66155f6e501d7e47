"""End-to-end comparison against the system ``patch`` utility.

The fixture patches are applied both by ``patch`` and by minipatch; both
results must equal the expected new text.
"""

import shutil
import subprocess

import pytest

from minipatch import apply

PATCH_BIN = shutil.which("patch")

pytestmark = pytest.mark.skipif(PATCH_BIN is None, reason="patch binary not found")


def _read(path):
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


@pytest.mark.parametrize("number", [1, 2])
def test_matches_gnu_patch(data_dir, tmp_path, number):
    old_file = data_dir / "hamlet_ending_old.txt"
    patch_file = data_dir / f"hamlet_ending_{number}.patch"
    out_file = tmp_path / "out.txt"

    subprocess.run(
        [PATCH_BIN, "-s", "-o", str(out_file), str(old_file), str(patch_file)],
        cwd=tmp_path,
        check=True,
        capture_output=True,
        timeout=30,
    )

    expected = _read(data_dir / "hamlet_ending_new.txt")
    assert _read(out_file) == expected
    assert apply(_read(patch_file), _read(old_file)) == expected
