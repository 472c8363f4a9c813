from pathlib import Path

import pytest

SAMPLE = """\
; WsprryPi configuration
# edited by hand, keep the comments

[Control]
Transmit = False

[Common]
Call Sign = AA0XX ; your call
Grid Square = ZZ99
TX Power = 20
Frequency = 20m

[Extended]
PPM = 0.0
Self Cal = True
Offset = t
Use LED = 1
Power Level = 7

[Server]
Port = 31415
"""


@pytest.fixture()
def sample_ini(tmp_path: Path) -> Path:
    ini = tmp_path / "wsprrypi.ini"
    ini.write_text(SAMPLE, encoding="utf-8")
    return ini
