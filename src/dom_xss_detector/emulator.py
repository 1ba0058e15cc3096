"""
Dynamic emulation pass for obfuscated DOM XSS flows.

The candidate script runs inside an embedded QuickJS interpreter whose
globals mock a browser: ``window`` is the global object, ``location`` holds
decoy values and ``eval``, ``setTimeout`` and ``document.write`` are traps.
Obfuscated calls such as ``window['ev' + 'al'](location.hash)`` resolve
through ordinary JavaScript semantics and land in a trap. A trap reports
only when its argument equals one of the decoy values, so a sink fed with
unrelated strings stays silent.

The interpreter has no host bindings: no ``process``, ``require`` or file
access. The only way out of the sandbox is the trap callback, which
receives strings.
"""

import logging
import time
from typing import Any, List, Optional

import quickjs

from .config import config
from .exceptions import EmulationError
from .models import Finding

logger = logging.getLogger(__name__)

DECOY_HASH = "#payload"
DECOY_SEARCH = "?q=payload"
DECOY_HREF = "http://example.com/#payload"

# Trap arguments that prove a decoy source reached a sink
PAYLOAD_MARKERS = ("payload", DECOY_HASH, DECOY_SEARCH)

EMULATOR_SOURCE = "Emulator"
EMULATOR_SINK = "Obfuscated Sink"

_TRAP_CALLBACK = "__domtaint_trap"

# Installs the mocked browser. The host callback is captured in a closure
# and removed from the global object before candidate code runs.
_PRELUDE = """
(function (trap, decoys) {
    var report = function (sink, value) {
        var arg;
        try {
            arg = String(value);
        } catch (e) {
            return;
        }
        trap(sink, arg);
    };

    globalThis.window = globalThis;
    globalThis.location = {
        hash: decoys.hash,
        search: decoys.search,
        href: decoys.href
    };
    globalThis.document = {
        write: function (markup) {
            if (arguments.length > 0) {
                report('document.write', markup);
            }
        },
        getElementById: function () {
            return { innerHTML: '' };
        }
    };
    globalThis.eval = function (source) {
        if (arguments.length > 0) {
            report('eval', source);
        }
    };
    globalThis.setTimeout = function (handler) {
        if (typeof handler === 'string') {
            report('setTimeout', handler);
        }
    };
})(%(callback)s, %(decoys)s);
delete globalThis.%(callback)s;
"""


class Emulator:
    """
    Runs one script in a mocked browser environment and records trap hits.

    An instance is meant for a single ``run``; each run gets a fresh
    interpreter, so no sandbox state is shared between analyses.
    """

    def __init__(self, timeout: Optional[float] = None, memory_limit: Optional[int] = None):
        """
        Initialize the emulator.

        Args:
            timeout: Execution budget in seconds (defaults to the configured one)
            memory_limit: Interpreter heap limit in bytes (defaults to the configured one)
        """
        self.timeout = timeout if timeout is not None else config.emulator_timeout
        self.memory_limit = memory_limit if memory_limit is not None else config.emulator_memory_limit
        self.findings: List[Finding] = []

    def run(self, code: str) -> List[Finding]:
        """
        Execute ``code`` under the traps, then drain pending promise jobs.

        The time budget covers the script and its promise callbacks
        together. Findings recorded before a failure stay available in
        ``self.findings``.

        Args:
            code: JavaScript source text

        Returns:
            Emulator findings in the order the traps fired

        Raises:
            EmulationError: If the script throws or the time budget is exceeded
        """
        context = quickjs.Context()
        context.set_memory_limit(self.memory_limit)
        context.add_callable(_TRAP_CALLBACK, self._trap)
        context.eval(_PRELUDE % {
            "callback": _TRAP_CALLBACK,
            "decoys": '{hash: "%s", search: "%s", href: "%s"}' % (DECOY_HASH, DECOY_SEARCH, DECOY_HREF),
        })

        deadline = time.monotonic() + self.timeout
        self._call_within(context, deadline, context.eval, code)
        while self._call_within(context, deadline, context.execute_pending_job):
            pass

        return self.findings

    def _call_within(self, context: Any, deadline: float, func, *args) -> Any:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise EmulationError("Script execution timed out")
        context.set_time_limit(remaining)
        try:
            return func(*args)
        except quickjs.JSException as e:
            message = str(e)
            if "interrupted" in message:
                raise EmulationError("Script execution timed out") from e
            raise EmulationError(message) from e

    def _trap(self, sink: Any, arg: Any) -> None:
        if isinstance(sink, str) and isinstance(arg, str) and arg in PAYLOAD_MARKERS:
            self._record(sink, arg)

    def _record(self, sink: str, arg: str) -> None:
        logger.debug("Emulator trap %s fired with %r", sink, arg)
        self.findings.append(Finding(
            source=EMULATOR_SOURCE,
            sink=EMULATOR_SINK,
            description=f"Emulator detected flow to {sink} with arg {arg}",
            evidence=f"{sink}({arg})",
        ))
