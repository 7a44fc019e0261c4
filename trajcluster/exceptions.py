"""Error types raised by the trajectory clustering pipeline."""

from __future__ import annotations

from typing import Optional


class TrajClusterError(Exception):
    """Base error carrying the pipeline stage and stratum that failed."""

    def __init__(self, message: str, stage: str = "clustering", stratum: Optional[str] = None) -> None:
        self.stage = stage
        self.stratum = stratum
        where = f"{stage} stage" if stratum is None else f"{stage} stage, stratum '{stratum}'"
        super().__init__(f"{message} ({where})")
        self.message = message

    def __reduce__(self):
        # subclasses take different constructor arguments; rebuild from state
        return _rebuild, (self.__class__, self.message, self.stage, self.stratum)


def _rebuild(cls, message: str, stage: str, stratum: Optional[str]) -> TrajClusterError:
    err = cls.__new__(cls)
    TrajClusterError.__init__(err, message, stage=stage, stratum=stratum)
    return err


class ConfigurationError(TrajClusterError, ValueError):
    """Invalid metric, cluster count or stratification settings."""

    def __init__(self, message: str, stage: str = "configuration", stratum: Optional[str] = None) -> None:
        super().__init__(message, stage=stage, stratum=stratum)


class InvalidClusterCountError(ConfigurationError):
    """Requested cluster count is outside 1..M."""

    def __init__(self, message: str, stratum: Optional[str] = None) -> None:
        super().__init__(message, stage="partitioning", stratum=stratum)


class InsufficientDataError(TrajClusterError):
    """No trajectory of the expected length is left to cluster."""

    def __init__(self, message: str, stratum: Optional[str] = None) -> None:
        super().__init__(message, stage="normalization", stratum=stratum)


class MalformedMatrixError(TrajClusterError, ValueError):
    """Distance matrix is not a valid dissimilarity matrix."""

    def __init__(self, message: str, stratum: Optional[str] = None) -> None:
        super().__init__(message, stage="partitioning", stratum=stratum)
