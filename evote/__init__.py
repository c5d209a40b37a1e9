"""
evote Package

Core imports are lazily loaded so that importing a submodule does not pull in
the logging setup. For direct module access, import from submodules:

    from evote.election import ElectionEngine, WorkflowStatus
    from evote.config import load_config
    from evote.exceptions import AlreadyVotedError
"""

# Lazy imports to avoid loading everything at package import
def __getattr__(name):
    """Lazy module loading."""
    if name == 'ElectionEngine':
        from .election import ElectionEngine
        return ElectionEngine
    elif name == 'WorkflowStatus':
        from .election import WorkflowStatus
        return WorkflowStatus
    elif name == 'load_config':
        from .config import load_config
        return load_config
    elif name == 'ElectionError':
        from .exceptions import ElectionError
        return ElectionError
    raise AttributeError(f"module 'evote' has no attribute {name!r}")

__all__ = ['ElectionEngine', 'WorkflowStatus', 'load_config', 'ElectionError']
