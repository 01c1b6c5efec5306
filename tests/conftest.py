"""
Shared test configuration and fixtures.
"""

import pytest

from plt_reorder.config import set_default_config


# Typical HP 4195A screen plot layout: annotations and graticule first,
# traces (pens 1 and 2) in between, SP0 at the end.
HP4195A_PLOT = (
    b"IN;DF;IP0,0,10000,7500;SC0,1000,0,750;"
    b"SP5;PU100,700;LBREF 0.000dB\x03;"
    b"SP3;PU0,0;PD1000,0,1000,750,0,750,0,0;"
    b"SP1;PU0,375;PD100,380,200,390,300,420;"
    b"SP2;PU0,200;PD100,210,200,190,300,230;"
    b"SP4;PU500,720;LBSTART 1.0MHz\x03;"
    b"SP1;PU10,740;LBA: REF\x03;"
    b"SP0;"
)


@pytest.fixture
def simple_plot() -> bytes:
    """Two pen 1 chunks around a pen 2 chunk, then the terminator."""
    return b"HDR;SP1AA;SP2BB;SP1CC;SP0;"


@pytest.fixture
def hp4195a_plot() -> bytes:
    """A small but realistic analyzer plot with pens 0-5."""
    return HP4195A_PLOT


@pytest.fixture(autouse=True)
def reset_default_config(monkeypatch):
    """Make every test read its configuration from a clean environment."""
    for name in ("PLT_REORDER_ORDER", "PLT_REORDER_MAX_CHUNKS",
                 "PLT_REORDER_MAX_FILE_SIZE", "PLT_REORDER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)
