"""
Discovery Tree: a single-rooted, strictly ordered tree of work items.

Features:
- Dense sibling positions maintained across create / move / delete
- Cycle prevention when reparenting
- Bottom-up completion (a task is DONE only once its children are)
- Readiness evaluation from left sibling and children
- JSON file store with atomic write-through persistence
"""

__version__ = "0.1.0"
__license__ = "MIT"

from discovery_tree.bootstrap import TaskTree, initialize_application

__all__ = [
    "__version__",
    "TaskTree",
    "initialize_application",
]
