from .gateway import Result, TaskGatewayClient
from .state import TrackerState
from .tracker import TaskTracker
from .view import render

__all__ = ["Result", "TaskGatewayClient", "TaskTracker", "TrackerState", "render"]
