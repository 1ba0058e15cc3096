"""
Static dataflow pass over an ESTree AST.

The propagator walks statements depth-first, keeps per-variable taint in
the tracker's scope chain and records a Finding whenever a tainted value
reaches a sink. Nodes are plain dicts as produced by esprima's ``toDict``.
"""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from .models import Finding
from .patterns import PROTOTYPE_PROPERTIES, SAFE_PROPERTIES
from .scope import ScopeKind
from .tracker import Tracker

logger = logging.getLogger(__name__)

# Placeholder for a call in the middle of an access chain, e.g. $().innerHTML
CALL_PLACEHOLDER = "$()"
# Suffix for a computed index that is not a string literal
UNKNOWN_INDEX = "[]"

Taint = Tuple[bool, str]
CLEAN: Taint = (False, "")


class Propagator:
    """
    Propagates taint through an AST and collects source-to-sink flows.

    Taint is flow-sensitive but path-insensitive: both branches of an
    ``if`` are walked, and assignment of a clean value clears the taint of
    the target variable. Function parameters start clean because call-site
    arguments are never bound to them.
    """

    def __init__(self, tracker: Tracker, code: str = ""):
        """
        Initialize the propagator.

        Args:
            tracker: Tracker supplying scopes and pattern matching
            code: Source text the AST was parsed from, used for evidence
        """
        self.tracker = tracker
        self.code = code
        self.findings: List[Finding] = []
        self.global_accesses: Set[str] = set()

    def run(self, program: Dict[str, Any]) -> List[Finding]:
        """
        Walk a parsed program.

        Args:
            program: ESTree ``Program`` node

        Returns:
            Findings in traversal order
        """
        self.walk(program)
        return self.findings

    def walk(self, node: Any) -> None:
        """Dispatch on the node type; unmodeled types are skipped."""
        if not isinstance(node, dict):
            return

        node_type = node.get("type")

        if node_type == "Program":
            for stmt in node.get("body") or []:
                self.walk(stmt)

        elif node_type == "VariableDeclaration":
            for decl in node.get("declarations") or []:
                self._handle_declarator(decl)

        elif node_type == "ExpressionStatement":
            self.walk(node.get("expression"))

        elif node_type == "AssignmentExpression":
            self._handle_assignment(node)

        elif node_type == "CallExpression":
            self._handle_call(node)

        elif node_type == "ObjectExpression":
            self._handle_object(node)

        elif node_type in ("FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression"):
            self._handle_function(node)

        elif node_type == "BlockStatement":
            self.tracker.enter_scope(ScopeKind.BLOCK)
            for stmt in node.get("body") or []:
                self.walk(stmt)
            self.tracker.leave_scope()

        elif node_type == "IfStatement":
            # No reachability pruning: dead branches are analyzed too
            self.walk(node.get("test"))
            self.walk(node.get("consequent"))
            self.walk(node.get("alternate"))

        elif node_type == "ReturnStatement":
            self.walk(node.get("argument"))

        else:
            logger.debug("Skipping unmodeled node type %s", node_type)

    def _handle_declarator(self, decl: Dict[str, Any]) -> None:
        target = decl.get("id") or {}
        if target.get("type") != "Identifier":
            logger.debug("Skipping destructuring declaration (%s)", target.get("type"))
            return

        variable = self.tracker.current_scope.define(target["name"])

        init = decl.get("init")
        if init:
            # Sinks nested in the initializer, e.g. an object literal key
            self.walk(init)

            tainted, origin = self.evaluate(init)
            if tainted:
                variable.taint(origin)

    def _handle_assignment(self, node: Dict[str, Any]) -> None:
        left = node.get("left") or {}
        right = node.get("right")
        compound = node.get("operator", "=") != "="

        self.walk(right)
        tainted, origin = self.evaluate(right)

        if left.get("type") == "Identifier":
            name = left["name"]
            variable = self.tracker.current_scope.lookup(name)
            if variable is None:
                # Implicit global
                variable = self.tracker.global_scope.define(name)
                self.global_accesses.add(name)

            if tainted:
                variable.taint(origin)
            elif not compound:
                variable.untaint()
            elif variable.tainted:
                tainted, origin = True, variable.taint_origin

            path = name
        else:
            path = self.reconstruct_path(left)

        if not path:
            return

        if self.tracker.is_sink(path) or self.tracker.is_sink(path + "="):
            is_proto = any(prop in path for prop in PROTOTYPE_PROPERTIES)
            if tainted:
                self._add_finding(source=origin, sink=path, node=node)
            elif is_proto:
                self._add_finding(
                    source=origin,
                    sink=path,
                    node=node,
                    description=f"Assignment to prototype chain property '{path}'",
                )

    def _handle_call(self, node: Dict[str, Any]) -> None:
        callee = node.get("callee") or {}
        arguments = node.get("arguments") or []

        if callee.get("type") == "Identifier":
            callee_name = callee["name"]
        else:
            callee_name = self.reconstruct_path(callee)

        if callee_name and (self.tracker.is_sink(callee_name) or self.tracker.is_sink(callee_name + "(")):
            for arg in arguments:
                tainted, origin = self.evaluate(arg)
                if tainted:
                    self._add_finding(source=origin, sink=callee_name, node=node)

        # Sinks nested in arguments, in an immediately invoked function or
        # in the receiver chain, e.g. $(eval(x)).html(y)
        for arg in arguments:
            self.walk(arg)
        receiver = callee
        while receiver.get("type") == "MemberExpression":
            receiver = receiver.get("object") or {}
        if receiver.get("type") in ("FunctionExpression", "ArrowFunctionExpression", "CallExpression"):
            self.walk(receiver)

    def _handle_object(self, node: Dict[str, Any]) -> None:
        for prop in node.get("properties") or []:
            if prop.get("type") != "Property":
                continue

            key_name = self._property_key(prop)
            value = prop.get("value")

            if key_name and self.tracker.is_sink(key_name):
                tainted, origin = self.evaluate(value)
                if tainted:
                    self._add_finding(
                        source=origin,
                        sink=key_name,
                        node=prop,
                        evidence=f"{key_name}: {origin}",
                    )
            else:
                self.walk(value)

    def _handle_function(self, node: Dict[str, Any]) -> None:
        self.tracker.enter_scope(ScopeKind.FUNCTION)

        # Parameters start clean: no call-site binding
        for param in node.get("params") or []:
            if param.get("type") == "Identifier":
                self.tracker.current_scope.define(param["name"])
            elif param.get("type") == "AssignmentPattern":
                target = param.get("left") or {}
                if target.get("type") == "Identifier":
                    self.tracker.current_scope.define(target["name"])

        body = node.get("body")
        if isinstance(body, dict) and body.get("type") == "BlockStatement":
            self.walk(body)
        elif body is not None:
            # Concise arrow body
            self.walk({"type": "ReturnStatement", "argument": body})

        self.tracker.leave_scope()

    def evaluate(self, expr: Any) -> Taint:
        """
        Compute the taint of an expression.

        Args:
            expr: ESTree expression node

        Returns:
            Tuple of (is_tainted, origin label). When several operands are
            tainted the left-most one supplies the origin.
        """
        if not isinstance(expr, dict):
            return CLEAN

        expr_type = expr.get("type")

        if expr_type == "Identifier":
            name = expr["name"]
            variable = self.tracker.current_scope.lookup(name)
            if variable is None:
                self.global_accesses.add(name)
            elif variable.tainted:
                return True, variable.taint_origin
            if self.tracker.is_source(name):
                return True, name
            return CLEAN

        if expr_type == "BinaryExpression":
            left = self.evaluate(expr.get("left"))
            if left[0]:
                return left
            return self.evaluate(expr.get("right"))

        if expr_type == "MemberExpression":
            if self._member_property(expr) in SAFE_PROPERTIES:
                return CLEAN

            path = self.reconstruct_path(expr)
            if self.tracker.is_source(path):
                return True, path
            # Any property of a tainted object is tainted
            return self.evaluate(expr.get("object"))

        if expr_type == "CallExpression":
            callee = expr.get("callee") or {}
            path = self.reconstruct_path(callee)
            if path and self.tracker.is_source(path):
                return True, path

            # Calls are taint-preserving; sanitizers are not recognized
            if callee.get("type") == "MemberExpression":
                receiver = self.evaluate(callee.get("object"))
                if receiver[0]:
                    return receiver
            for arg in expr.get("arguments") or []:
                result = self.evaluate(arg)
                if result[0]:
                    return result
            return CLEAN

        if expr_type == "AssignmentExpression":
            # a = b = source: the value of an assignment is its right side
            return self.evaluate(expr.get("right"))

        if expr_type == "ObjectExpression":
            for prop in expr.get("properties") or []:
                if prop.get("type") != "Property":
                    continue
                result = self.evaluate(prop.get("value"))
                if result[0]:
                    return result
            return CLEAN

        return CLEAN

    def reconstruct_path(self, expr: Any) -> str:
        """
        Flatten an access chain into a dotted name.

        ``obj['prop']`` becomes ``obj.prop``; a call inside the chain becomes
        ``$()`` and a non-literal index becomes ``[]``.

        Args:
            expr: Identifier, MemberExpression or CallExpression node

        Returns:
            Dotted path, or an empty string for other node types
        """
        if not isinstance(expr, dict):
            return ""

        expr_type = expr.get("type")

        if expr_type == "Identifier":
            return expr.get("name", "")

        if expr_type == "MemberExpression":
            obj = self.reconstruct_path(expr.get("object"))
            prop = self._member_property(expr)
            if prop is None:
                return obj + UNKNOWN_INDEX
            return f"{obj}.{prop}" if obj else f".{prop}"

        if expr_type == "CallExpression":
            return CALL_PLACEHOLDER

        return ""

    def identify_dependencies(self, expr: Any) -> List[str]:
        """
        List the variable names an expression reads, in source order.

        Args:
            expr: ESTree expression node

        Returns:
            Identifier names, duplicates preserved
        """
        deps: List[str] = []

        def visit(node: Any) -> None:
            if not isinstance(node, dict):
                return
            node_type = node.get("type")
            if node_type == "Identifier":
                deps.append(node["name"])
            elif node_type == "BinaryExpression":
                visit(node.get("left"))
                visit(node.get("right"))
            elif node_type == "CallExpression":
                visit(node.get("callee"))
                for arg in node.get("arguments") or []:
                    visit(arg)
            elif node_type == "MemberExpression":
                visit(node.get("object"))
                if node.get("computed"):
                    visit(node.get("property"))

        visit(expr)
        return deps

    def _member_property(self, expr: Dict[str, Any]) -> Optional[str]:
        prop = expr.get("property") or {}
        if not expr.get("computed"):
            return prop.get("name")
        if prop.get("type") == "Literal" and isinstance(prop.get("value"), str):
            return prop["value"]
        return None

    def _property_key(self, prop: Dict[str, Any]) -> Optional[str]:
        key = prop.get("key") or {}
        if prop.get("computed"):
            return None
        if key.get("type") == "Identifier":
            return key.get("name")
        if key.get("type") == "Literal":
            return str(key.get("value"))
        return None

    def _snippet(self, node: Dict[str, Any]) -> str:
        node_range = node.get("range")
        if self.code and node_range:
            start, end = node_range
            return self.code[start:end]
        return ""

    def _add_finding(self, *, source: str, sink: str, node: Dict[str, Any],
                     description: Optional[str] = None, evidence: Optional[str] = None) -> None:
        finding = Finding(
            source=source,
            sink=sink,
            description=description or f"Source '{source}' flows into sink '{sink}'",
            evidence=evidence if evidence is not None else self._snippet(node),
        )
        logger.debug("Flow detected: %s -> %s", source, sink)
        self.findings.append(finding)
