from vpkg.integrations.process.abc import ProcessResult, ProcessRunner
from vpkg.integrations.process.real import RealProcessRunner

__all__ = ["ProcessResult", "ProcessRunner", "RealProcessRunner"]
