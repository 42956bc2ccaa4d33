from .merger import GroupResult, MergeService, RunReport

__all__ = ["GroupResult", "MergeService", "RunReport"]
