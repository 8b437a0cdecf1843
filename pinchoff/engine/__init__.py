from .parameters import EngineParameters, MIN_CASE_NO
