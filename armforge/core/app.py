"""Root construct of a construct tree."""

from pathlib import Path
from typing import Dict, Optional, Union

import structlog

from ..config.models import ArmForgeConfig
from ..naming.conventions import NamingConventions
from ..synthesis.assembly import AssemblyWriter, CloudAssembly
from ..synthesis.synthesizer import Synthesizer
from ..synthesis.traverser import TreeTraverser
from .construct import Construct

logger = structlog.get_logger(__name__)


class App(Construct):
    """Root of the construct tree.

    The App has no scope and an empty path. Stacks created directly under it
    read tree-wide settings (naming conventions, default tags, subscription
    id) from its configuration.

    Args:
        config: Settings for naming, validation, output and logging
        outdir: Output directory overriding ``config.output.outdir``
    """

    def __init__(
        self,
        config: Optional[ArmForgeConfig] = None,
        outdir: Optional[Union[str, Path]] = None,
    ) -> None:
        self.config = config or ArmForgeConfig()
        self.naming_conventions = NamingConventions.from_settings(self.config.naming)
        self.outdir = Path(outdir) if outdir is not None else self.config.output.outdir
        super().__init__(None, "")

    @property
    def default_tags(self) -> Dict[str, str]:
        return dict(self.config.default_tags)

    @property
    def subscription_id(self) -> Optional[str]:
        return self.config.subscription_id

    def synth(self, outdir: Optional[Union[str, Path]] = None) -> CloudAssembly:
        """Synthesize every stack and write the assembly to ``outdir``.

        Every stack is synthesized and validated before anything is written,
        so a failing stack leaves the output directory untouched.

        Raises:
            TemplateValidationError: If any stack fails validation
            DependencyCycleError: If resources reference each other in a loop
        """
        target = Path(outdir) if outdir is not None else self.outdir
        traversal = TreeTraverser().traverse(self)
        synthesizer = Synthesizer(validation_settings=self.config.validation)

        results = []
        for stack in traversal.stacks.values():
            result = synthesizer.synthesize(stack)
            logger.info(
                "stack_synthesized",
                stack=result.stack_name,
                resources=result.resource_count,
                warnings=len(result.validation.warnings),
            )
            results.append(result)

        assembly = CloudAssembly(directory=target, stacks=tuple(results))
        AssemblyWriter(self.config.output).write(assembly)
        return assembly
