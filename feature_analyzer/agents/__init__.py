from .base_agent import BaseAgent
from .extraction_agent import ExtractionAgent
from .dependency_graph_agent import DependencyGraphAgent
from .contradiction_agent import ContradictionAgent
from .complexity_agent import ComplexityAgent

__all__ = [
    "BaseAgent",
    "ExtractionAgent",
    "DependencyGraphAgent",
    "ContradictionAgent",
    "ComplexityAgent",
]
