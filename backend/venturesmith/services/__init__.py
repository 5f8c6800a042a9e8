from .venture_service import create_venture, get_venture, list_ventures, patch_venture_field
from .artifact_codec import decode_artifact, encode_artifact
from .generation_guard import generation_registry

__all__ = [
    "create_venture",
    "get_venture",
    "list_ventures",
    "patch_venture_field",
    "decode_artifact",
    "encode_artifact",
    "generation_registry",
]
