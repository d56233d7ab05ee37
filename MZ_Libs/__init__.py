"""
MZ_Libs - Mirrorize Library Modules

This package contains core functionality for the Mirrorize project,
organized into specialized sub-packages:

- DirectiveLib: Directive models, mirror templates and the mirrorize composer
- EngineLib: Image handles and the engines that execute directive queues
"""

__version__ = "0.1.0"
