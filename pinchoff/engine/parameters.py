"""
Reserved parameters read by the pinch-off engine at start-up.

The engine itself is compiled C; this module mirrors its parameter contract
so a parameter file can be checked before a case is launched.
"""

from dataclasses import dataclass

from pinchoff.config import Params
from pinchoff.runtime.dirs import case_log_name


MIN_CASE_NO = 1000


@dataclass
class EngineParameters:
    """
    Dimensionless groups and run controls of one case.

    Parameters
    ----------
    case_no : int
        Case identifier, at least 1000 so case folders sort lexicographically.
    max_level : int
        Maximum refinement level of the adaptive grid.
    oh : float
        Solvent Ohnesorge number.
    oha : float
        Ohnesorge number of the surrounding gas.
    de : float
        Deborah number.
    ec : float
        Elasto-capillary number.
    tmax : float
        End time of the run.
    dtmax : float
        Upper bound of the time step.
    """
    case_no: int
    max_level: int = 12
    oh: float = 1e-2
    oha: float = 1e-4
    de: float = 1e30
    ec: float = 1.0
    tmax: float = 200.0
    dtmax: float = 1e-5

    @classmethod
    def from_params(cls, params: Params) -> "EngineParameters":
        """Read the reserved keys, falling back to the engine defaults."""
        oh = params.get_double("Oh", cls.oh)
        return cls(
            case_no=params.get_int("CaseNo", 0),
            max_level=params.get_int("MAXlevel", cls.max_level),
            oh=oh,
            oha=params.get_double("Oha", 1e-2 * oh),
            de=params.get_double("De", cls.de),
            ec=params.get_double("Ec", cls.ec),
            tmax=params.get_double("tmax", cls.tmax),
            dtmax=params.get_double("dtmax", cls.dtmax),
        )

    def validate(self) -> "EngineParameters":
        if self.case_no < MIN_CASE_NO:
            raise ValueError(f"CaseNo must be >= {MIN_CASE_NO}, got: {self.case_no}")
        if not 0 < self.dtmax <= self.tmax:
            raise ValueError(f"dtmax must satisfy 0 < dtmax <= tmax, got dtmax={self.dtmax:g}, tmax={self.tmax:g}")
        return self

    @property
    def log_file_name(self) -> str:
        return case_log_name(self.case_no)
