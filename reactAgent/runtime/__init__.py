"""Runtime: execution context, depth guard, spawner, orchestrator and assembly."""

from .app import build_application
from .context import ExecutionContext
from .depth_guard import DepthGuard
from .model_resolver import ChatModel, build_chat_model, resolve_model_config
from .orchestrator import Orchestrator
from .session import Session
from .spawner import SubAgentSpawner

__all__ = [
    "build_application",
    "build_chat_model",
    "resolve_model_config",
    "ChatModel",
    "DepthGuard",
    "ExecutionContext",
    "Orchestrator",
    "Session",
    "SubAgentSpawner",
]
