"""
Lexical scope model used by the static taint pass.

Scopes form a tree through their ``parent`` links. A binding in an inner
scope hides a binding of the same name in any enclosing scope.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class ScopeKind(Enum):
    """Construct that opened a scope."""
    GLOBAL = "global"
    FUNCTION = "function"
    BLOCK = "block"


@dataclass
class Variable:
    """
    A named binding with its taint state.

    ``taint_origin`` is a human-readable label for the source the value
    was derived from, empty while the variable is clean.
    """
    name: str
    tainted: bool = False
    taint_origin: str = ""

    def taint(self, origin: str) -> None:
        """Mark the variable as derived from ``origin``."""
        self.tainted = True
        self.taint_origin = origin

    def untaint(self) -> None:
        """Clear taint, e.g. after reassignment to a safe value."""
        self.tainted = False
        self.taint_origin = ""


@dataclass
class Scope:
    """A lexical scope holding variables by name."""
    kind: ScopeKind
    parent: Optional["Scope"] = None
    variables: Dict[str, Variable] = field(default_factory=dict)

    def define(self, name: str) -> Variable:
        """
        Create a binding in this scope.

        Redeclaring a name in the same scope replaces the previous binding.

        Args:
            name: Variable name

        Returns:
            The new, untainted Variable
        """
        variable = Variable(name)
        self.variables[name] = variable
        return variable

    def lookup(self, name: str) -> Optional[Variable]:
        """
        Resolve ``name`` in this scope, then up the parent chain.

        Args:
            name: Variable name

        Returns:
            The nearest binding, or None when the name is global or undeclared
        """
        scope: Optional[Scope] = self
        while scope is not None:
            variable = scope.variables.get(name)
            if variable is not None:
                return variable
            scope = scope.parent
        return None

    @property
    def is_global(self) -> bool:
        return self.parent is None
