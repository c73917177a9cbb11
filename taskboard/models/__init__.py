# Both models are loaded together so the User <-> Task relationship resolves
from .user import User
from .task import Task, TaskStatus, TaskPriority

__all__ = ["User", "Task", "TaskStatus", "TaskPriority"]
