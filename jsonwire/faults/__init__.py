"""Fault reporting: error trees and the fault adapter."""

from jsonwire.faults.error_tree import ErrorNode, Failure, FaultEnvelope, build
from jsonwire.faults.adapter import FaultAdapter, adapt

__all__ = ["ErrorNode", "Failure", "FaultEnvelope", "build", "FaultAdapter", "adapt"]
