"""
Driver settings schema.

One flat dataclass mirroring the `[driver]` table of `pinchoff.toml`. The
defaults reproduce the conventions of the simulation cases shipped with this
repository, so the file is optional.
"""

from dataclasses import dataclass, field, fields


@dataclass
class DriverSettings:
    """
    Conventions used by the case driver.

    Paths in `include_dirs` are passed to the compiler verbatim and are
    therefore relative to the case directory.
    """
    exec: str = "LiquidOutThinning.c"
    params: str = "default.params"
    threads: int = 4
    compiler: str = "qcc"
    include_dirs: list[str] = field(default_factory=lambda: ["../../src-local"])
    cflags: list[str] = field(default_factory=lambda: ["-O2", "-Wall", "-disable-dimensions"])
    openmp_flag: str = "-fopenmp"
    libs: list[str] = field(default_factory=lambda: ["-lm"])
    cases_dir: str = "simulationCases"
    local_params: str = "case.params"
    checkpoint: str = "restart"
    thread_env: str = "OMP_NUM_THREADS"
    search_path: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "DriverSettings":
        """Build settings from a raw table, rejecting unknown keys and wrong types."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"Unknown driver setting(s): {', '.join(unknown)}")

        defaults = cls()
        for name, value in data.items():
            expected = type(getattr(defaults, name))
            if expected is int and isinstance(value, bool) or not isinstance(value, expected):
                raise ValueError(
                    f"Driver setting '{name}' must be of type {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
            if expected is list and not all(isinstance(item, str) for item in value):
                raise ValueError(f"Driver setting '{name}' must be a list of strings")
            if expected is dict and not all(isinstance(item, str) for item in value.values()):
                raise ValueError(f"Driver setting '{name}' must map names to strings")
        return cls(**data)
