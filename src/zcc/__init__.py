"""
zcc - starter packs, hooks and commands for AI coding assistants

zcc scaffolds modes, workflows, agents and hooks into a project, installs
starter packs from local, GitHub or HTTP sources and tracks which pack owns
every installed file.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
