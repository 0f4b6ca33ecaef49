"""
Intermediate representation for handlegen.

The parser turns a tagged class into an :class:`ImplDeclaration`; every
builder reads that same value and returns source text, collected in a
:class:`GeneratedArtifactSet`.

Design Principles:
------------------
1. **Immutable**: every type is a frozen dataclass and one declaration is
   shared by all builders.
2. **Text-carrying**: annotations, defaults, decorators and bodies are kept
   as the exact source text they were written with.
3. **Short-lived**: nothing here outlives one generation pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple


# =============================================================================
# Enumerations
# =============================================================================

class Visibility(str, Enum):
    """Declared visibility, read from Python naming conventions"""
    PUBLIC = "public"
    RESTRICTED = "restricted"
    PRIVATE = "private"


class ReceiverKind(str, Enum):
    """How a method receives its handle"""
    OWNED = "owned"


class ParameterKind(str, Enum):
    """Python parameter kinds, in the order they may appear"""
    POSITIONAL_ONLY = "positional_only"
    POSITIONAL_OR_KEYWORD = "positional_or_keyword"
    VAR_POSITIONAL = "var_positional"
    KEYWORD_ONLY = "keyword_only"
    VAR_KEYWORD = "var_keyword"


# =============================================================================
# Declarations
# =============================================================================

@dataclass(frozen=True)
class ParameterBinding:
    """One parameter of a method, excluding the ``self`` receiver"""
    name: str
    kind: ParameterKind = ParameterKind.POSITIONAL_OR_KEYWORD
    annotation: Optional[str] = None
    default: Optional[str] = None

    @property
    def is_structural(self) -> bool:
        return self.kind in (ParameterKind.VAR_POSITIONAL, ParameterKind.VAR_KEYWORD)

    @property
    def has_default(self) -> bool:
        return self.default is not None


@dataclass(frozen=True)
class Signature:
    """Name, parameters and return annotation of a method"""
    name: str
    parameters: Tuple[ParameterBinding, ...] = ()
    returns: Optional[str] = None
    is_async: bool = True

    def with_parameters(self, parameters: Tuple[ParameterBinding, ...]) -> Signature:
        return replace(self, parameters=tuple(parameters))


@dataclass(frozen=True)
class MethodDeclaration:
    """A method of the tagged class.

    ``body`` is the verbatim source of the method body and ``body_indent`` the
    indentation its statements were written at. ``verbatim_lines`` indexes the
    body lines that continue a string literal and must never be re-indented.
    """
    signature: Signature
    visibility: Visibility
    body: str
    body_indent: str = ""
    verbatim_lines: Tuple[int, ...] = ()
    receiver: ReceiverKind = ReceiverKind.OWNED
    decorators: Tuple[str, ...] = ()
    lineno: Optional[int] = None

    @property
    def name(self) -> str:
        return self.signature.name


@dataclass(frozen=True)
class ImplDeclaration:
    """The structured form of one tagged class"""
    type_name: str
    backend: str
    methods: Tuple[MethodDeclaration, ...] = ()
    interface_name: Optional[str] = None
    type_params: Optional[str] = None
    path: Optional[str] = None

    @property
    def is_richer(self) -> bool:
        """True when the class names its interface and gets a wrapper."""
        return self.interface_name is not None

    @property
    def resolved_interface_name(self) -> str:
        return self.interface_name or self.type_name

    @property
    def interface_ref(self) -> str:
        """The interface as written in a base-class list."""
        if self.type_params:
            return f"{self.resolved_interface_name}[{self.type_params}]"
        return self.resolved_interface_name

    def is_eligible(self, method: MethodDeclaration) -> bool:
        # __name methods are mangled per class and cannot cross adapters
        if method.visibility is Visibility.PRIVATE:
            return False
        if not self.is_richer:
            return True
        return method.visibility is Visibility.PUBLIC

    def eligible_methods(self) -> Tuple[MethodDeclaration, ...]:
        return tuple(method for method in self.methods if self.is_eligible(method))


# =============================================================================
# Backends and output
# =============================================================================

@dataclass(frozen=True)
class BackendMapping:
    """Driver types a backend token stands for"""
    backend: str
    direct_handle_type: str
    pooled_handle_type: str
    module: str
    requirement: str = ""


@dataclass(frozen=True)
class GeneratedArtifactSet:
    """Everything one generation pass produces, as source text"""
    interface: str
    connection_impl: str
    pool_impl: str
    wrapper: Optional[str] = None
    imports: Tuple[str, ...] = field(default_factory=tuple)
    type_checking_imports: Tuple[str, ...] = field(default_factory=tuple)

    def artifacts(self) -> Tuple[str, ...]:
        parts = [self.interface, self.connection_impl, self.pool_impl]
        if self.wrapper is not None:
            parts.append(self.wrapper)
        return tuple(parts)
