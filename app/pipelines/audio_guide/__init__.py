"""Audio guide generation pipeline package.

Modules are organised by the order in which `/generate-audio` executes:

1. `validation` – trim and check the attraction description.
2. `enrichment` – best-effort reverse geocoding of the coordinates.
3. `facts` – first generation call producing 3-5 facts.
4. `script` – second generation call producing the narration script.
5. `synthesis` – speech provider call producing the MP3 bytes.
6. `flow` – the orchestrator sequencing all of the above.

`deadline` and `errors` are shared by every stage. Provider adapters live in
`app.services` and are wired together by `factory`.
"""

from .deadline import RequestDeadline
from .errors import (
    AttractionValidationError,
    ErrorOrigin,
    PipelineCancelledError,
    PipelineError,
    PipelineTimeoutError,
    Provider,
    UpstreamProviderError,
    error_response,
)
from .flow import AudioGuidePipeline
from .types import (
    AttractionDescription,
    AudioArtifact,
    FactSet,
    LocationContext,
    NarrationScript,
    PipelineOutcome,
    PipelineState,
    RawAttraction,
)
from .validation import validate_attraction

__all__ = [
    "AttractionDescription",
    "AttractionValidationError",
    "AudioArtifact",
    "AudioGuidePipeline",
    "ErrorOrigin",
    "FactSet",
    "LocationContext",
    "NarrationScript",
    "PipelineCancelledError",
    "PipelineError",
    "PipelineOutcome",
    "PipelineState",
    "PipelineTimeoutError",
    "Provider",
    "RawAttraction",
    "RequestDeadline",
    "UpstreamProviderError",
    "error_response",
    "validate_attraction",
]
