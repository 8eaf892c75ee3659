"""Unit tests for the standalone version entry point."""

import pytest

from biosample_analyzer.version import __version__
from biosample_analyzer.version_cli import main


def test_prints_version_and_exits_zero(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 0
    assert capsys.readouterr().out.strip() == f"biosample-analyzer version {__version__}"
