"""System characterization printed alongside benchmark results.

Captures the interpreter, OS and clock information a reader needs to
put micro-benchmark numbers in context.
"""

from __future__ import annotations

import json
import os
import platform
import time
from dataclasses import asdict, dataclass
from typing import Any

from microbench.bench.provider import describe_clocks


@dataclass
class SystemProfile:
    """Characterization of the process running the benchmarks."""

    python_version: str = ""
    python_implementation: str = ""
    os_name: str = ""
    os_release: str = ""
    architecture: str = ""
    cpu_count: int = 0
    hostname: str = ""
    wall_resolution_ms: float = 0.0
    cpu_resolution_ms: float = 0.0
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SystemProfile:
        """Deserialize from a dict, ignoring unknown fields."""
        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}
        return cls(**filtered)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


def capture_system_profile() -> SystemProfile:
    """Capture the current system profile."""
    clocks = describe_clocks()
    return SystemProfile(
        python_version=platform.python_version(),
        python_implementation=platform.python_implementation(),
        os_name=platform.system(),
        os_release=platform.release(),
        architecture=platform.machine(),
        cpu_count=os.cpu_count() or 0,
        hostname=platform.node(),
        wall_resolution_ms=clocks["wall_resolution_ms"],
        cpu_resolution_ms=clocks["cpu_resolution_ms"],
        timestamp=time.strftime("%Y-%m-%dT%H:%M:%S%z"),
    )


def format_system_profile(profile: SystemProfile) -> str:
    """Format a system profile for terminal display."""
    lines = [
        "System Profile",
        "─" * 14,
        f"Python:   {profile.python_version} ({profile.python_implementation})",
        f"OS:       {profile.os_name} {profile.os_release} ({profile.architecture})",
        f"CPUs:     {profile.cpu_count}",
        (
            f"Clocks:   wall {profile.wall_resolution_ms:.6g} ms, "
            f"cpu {profile.cpu_resolution_ms:.6g} ms resolution"
        ),
        f"Hostname: {profile.hostname}",
        f"Time:     {profile.timestamp}",
    ]
    return "\n".join(lines)
