"""ctypes adapter between compiled code and the framework.

Every unsafe cast lives in this module. Compiled fixtures and test bodies
are plain C-ABI functions:

- fixture setup/teardown: ``void f(void *args)``
- test body: ``void t(void *test, void *suite, void *session)``
- parameterized body: ``void p(void *test, void *suite, void *session, int idx)``

:func:`from_address` and :func:`from_library` wrap such functions into
:class:`ForeignFunction` callables that accept :class:`ArgsHandle` values
(or None) and hand the underlying raw pointer to the compiled code.
:func:`handle_for` builds a handle for caller-owned ``ctypes`` memory.

Typical usage
-------------
    lib = ctypes.CDLL("./libmath_ops_tests.so")
    scratch = ScratchSpace()              # a ctypes.Structure owned by the caller
    args = handle_for(scratch, tag="scratch")
    setup = from_library(lib, "setup_scratch", CallbackKind.FIXTURE)
    body = from_library(lib, "test_mat_mul", CallbackKind.TEST)
"""

from __future__ import annotations

import ctypes
import logging
from enum import Enum
from typing import Any

from fortest.domain.value_objects import ArgsHandle

logger = logging.getLogger(__name__)

FIXTURE_PROTOTYPE = ctypes.CFUNCTYPE(None, ctypes.c_void_p)
TEST_PROTOTYPE = ctypes.CFUNCTYPE(None, ctypes.c_void_p, ctypes.c_void_p, ctypes.c_void_p)
PARAMETERIZED_PROTOTYPE = ctypes.CFUNCTYPE(
    None, ctypes.c_void_p, ctypes.c_void_p, ctypes.c_void_p, ctypes.c_int
)

_MEMORY_TYPES = (ctypes.Structure, ctypes.Union, ctypes.Array)


class ForeignSymbolError(LookupError):
    """Raised when a symbol cannot be resolved in a compiled library."""

    def __init__(self, symbol: str, library: str) -> None:
        super().__init__(f"Symbol '{symbol}' not found in library '{library}'.")
        self.symbol = symbol
        self.library = library


class CallbackKind(Enum):
    """Shape of a compiled callback."""

    FIXTURE = "fixture"
    TEST = "test"
    PARAMETERIZED = "parameterized"

    @property
    def prototype(self) -> Any:
        """The ctypes function prototype for this shape."""
        return {
            CallbackKind.FIXTURE: FIXTURE_PROTOTYPE,
            CallbackKind.TEST: TEST_PROTOTYPE,
            CallbackKind.PARAMETERIZED: PARAMETERIZED_PROTOTYPE,
        }[self]


def address_of(handle: ArgsHandle | None) -> int | None:
    """Return the raw address carried by a handle (None for NULL).

    Accepted handle values: an integer address, a ``ctypes`` pointer or
    ``c_void_p`` (its target), or ``ctypes`` memory such as a structure,
    array or scalar (its own storage).

    Raises:
        TypeError: If the value is not foreign memory.
    """
    if handle is None or handle.value is None:
        return None
    value = handle.value
    if isinstance(value, int):
        return value or None
    if isinstance(value, _MEMORY_TYPES):
        return ctypes.addressof(value)
    if isinstance(value, ctypes.c_void_p) or hasattr(value, "contents"):
        return ctypes.cast(value, ctypes.c_void_p).value
    try:
        return ctypes.addressof(value)
    except TypeError as e:
        raise TypeError(
            f"Handle {handle.tag!r} carries {type(value).__name__}, not foreign memory"
        ) from e


def handle_for(obj: Any, tag: str | None = None) -> ArgsHandle:
    """Build a handle for caller-owned ``ctypes`` memory.

    The handle records the object's type name (unless ``tag`` is given) and
    its ``ctypes.sizeof``. The caller keeps ``obj`` alive for as long as the
    handle is registered.
    """
    return ArgsHandle(obj, tag or type(obj).__name__, ctypes.sizeof(obj))


class ForeignFunction:
    """Python callable wrapping a compiled C-ABI function.

    Args:
        cfunc: A ctypes function object built from the prototype of ``kind``.
        kind: Callback shape.
        name: Display name (symbol or hex address).
    """

    def __init__(self, cfunc: Any, kind: CallbackKind, name: str) -> None:
        self._cfunc = cfunc
        self.kind = kind
        self.name = name

    def __call__(self, *args: Any) -> None:
        if self.kind is CallbackKind.PARAMETERIZED:
            *handles, idx = args
            self._cfunc(*(address_of(h) for h in handles), int(idx))
        else:
            self._cfunc(*(address_of(h) for h in args))

    def __repr__(self) -> str:
        return f"ForeignFunction({self.name!r}, kind={self.kind.value})"


def from_address(address: int | None, kind: CallbackKind) -> ForeignFunction | None:
    """Wrap a raw function address; a NULL address means "no callback"."""
    if not address:
        return None
    cfunc = kind.prototype(address)
    return ForeignFunction(cfunc, kind, hex(address))


def from_library(
    library: ctypes.CDLL | str, symbol: str, kind: CallbackKind
) -> ForeignFunction:
    """Resolve an exported symbol of a compiled library.

    Args:
        library: A loaded library or a path to load with ``ctypes.CDLL``.
        symbol: Exported function name (Fortran ``bind(C, name=...)`` name).
        kind: Callback shape.

    Raises:
        ForeignSymbolError: If the symbol is not exported.
    """
    lib = ctypes.CDLL(library) if isinstance(library, str) else library
    try:
        cfunc = kind.prototype((symbol, lib))
    except AttributeError as e:
        raise ForeignSymbolError(symbol, getattr(lib, "_name", str(lib))) from e
    logger.debug("Resolved %s %s in %s", kind.value, symbol, getattr(lib, "_name", lib))
    return ForeignFunction(cfunc, kind, symbol)
