"""Cloud assembly: the set of synthesized templates and its manifest."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import structlog

from ..config.models import OutputSettings
from .synthesizer import StackSynthesisResult

logger = structlog.get_logger(__name__)

MANIFEST_FILE = "manifest.json"
MANIFEST_VERSION = "1.0.0"


@dataclass(frozen=True)
class CloudAssembly:
    """Synthesized templates of every stack in an App."""

    directory: Path
    stacks: Tuple[StackSynthesisResult, ...] = ()

    def get_stack(self, stack_name: str) -> StackSynthesisResult:
        for stack in self.stacks:
            if stack.stack_name == stack_name:
                return stack
        raise KeyError(f"No stack named '{stack_name}' in the assembly")

    def template_file(self, stack_name: str) -> str:
        return f"{stack_name}.json"

    def manifest(self) -> Dict[str, Any]:
        """Manifest describing every template in the assembly."""
        stacks: Dict[str, Any] = {}
        for result in self.stacks:
            entry: Dict[str, Any] = {
                "templateFile": self.template_file(result.stack_name),
                "path": result.stack_path,
                "scope": result.scope.value,
                "resourceCount": result.resource_count,
            }
            entry.update(result.metadata)
            stacks[result.stack_name] = entry
        return {"version": MANIFEST_VERSION, "stacks": stacks}


class AssemblyWriter:
    """Writes a cloud assembly to disk.

    Args:
        settings: Output formatting settings
    """

    def __init__(self, settings: Optional[OutputSettings] = None) -> None:
        self.settings = settings or OutputSettings()

    def _dumps(self, data: Dict[str, Any]) -> str:
        indent = self.settings.indent if self.settings.pretty_print else None
        return json.dumps(data, indent=indent) + "\n"

    def write(self, assembly: CloudAssembly) -> List[Path]:
        """Write one template per stack plus ``manifest.json``.

        Returns:
            Written file paths, manifest last
        """
        directory = Path(assembly.directory)
        directory.mkdir(parents=True, exist_ok=True)

        written: List[Path] = []
        for result in assembly.stacks:
            path = directory / assembly.template_file(result.stack_name)
            path.write_text(self._dumps(result.template), encoding="utf-8")
            written.append(path)

        manifest_path = directory / MANIFEST_FILE
        manifest_path.write_text(self._dumps(assembly.manifest()), encoding="utf-8")
        written.append(manifest_path)

        logger.info(
            "assembly_written",
            directory=str(directory),
            stacks=len(assembly.stacks),
            files=len(written),
        )
        return written
