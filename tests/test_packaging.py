from __future__ import annotations

import re
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def test_mcp_is_pinned_below_2():
    # FastMCP lives at mcp.server.fastmcp only in the 1.x series.
    requirement = re.search(r'"mcp([^"]*)"', PYPROJECT.read_text())
    assert requirement is not None
    assert "<2" in requirement.group(1)
