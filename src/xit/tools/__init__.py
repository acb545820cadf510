from .xit_tools import register_xit_tools

__all__ = ["register_xit_tools"]
