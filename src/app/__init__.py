"""Application bootstrap helpers for the Via Latina drill project."""

from .runtime import bootstrap, build_workflow
from .settings import AppSettings

__all__ = ["bootstrap", "build_workflow", "AppSettings"]
