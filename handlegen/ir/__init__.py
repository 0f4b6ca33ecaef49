"""
Intermediate Representation (IR) for handlegen.

The IR sits between the parsed Python source and the code builders. It is
built fresh for each tagged class and discarded once the generated artifacts
exist.
"""

from .spec import (
    BackendMapping,
    GeneratedArtifactSet,
    ImplDeclaration,
    MethodDeclaration,
    ParameterBinding,
    ParameterKind,
    ReceiverKind,
    Signature,
    Visibility,
)

__all__ = [
    "BackendMapping",
    "GeneratedArtifactSet",
    "ImplDeclaration",
    "MethodDeclaration",
    "ParameterBinding",
    "ParameterKind",
    "ReceiverKind",
    "Signature",
    "Visibility",
]
