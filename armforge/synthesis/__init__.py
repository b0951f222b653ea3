"""Template synthesis for armforge.

Turns the construct tree into one validated ARM template per stack:
traverse -> collect -> render -> order -> validate -> (optionally) write.
"""

from .assembly import AssemblyWriter, CloudAssembly
from .collector import ResourceCollector
from .dependency_resolver import DependencyResolver
from .pipeline import ValidationPipeline
from .synthesizer import StackSynthesisResult, Synthesizer, build_template, synthesize
from .transformer import RenderedResource, ResourceTransformer
from .traverser import TraversalResult, TreeTraverser, traverse
from .validators import TemplateValidator, ValidationContext

__all__ = [
    "AssemblyWriter",
    "CloudAssembly",
    "DependencyResolver",
    "RenderedResource",
    "ResourceCollector",
    "ResourceTransformer",
    "StackSynthesisResult",
    "Synthesizer",
    "TemplateValidator",
    "TraversalResult",
    "TreeTraverser",
    "ValidationContext",
    "ValidationPipeline",
    "build_template",
    "synthesize",
    "traverse",
]
