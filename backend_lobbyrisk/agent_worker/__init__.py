"""
Agent worker package: per-identity fetch-and-score pipeline, the bounded task
pool that runs it, and the orchestrator that resolves a lobby batch.
"""

from backend_lobbyrisk.agent_worker.orchestrator import AggregationOrchestrator, validate_batch
from backend_lobbyrisk.agent_worker.pipeline import PipelineConfig, ProfilePipeline
from backend_lobbyrisk.agent_worker.pool import TaskPool

__all__ = [
    "AggregationOrchestrator",
    "PipelineConfig",
    "ProfilePipeline",
    "TaskPool",
    "validate_batch",
]
