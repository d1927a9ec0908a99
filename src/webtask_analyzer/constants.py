"""Constants shared across the analyzer."""

from __future__ import annotations

REQUIRE_FUNCTION_NAME = "require"

TYPE_GLOBAL = "global"
TYPE_REQUIRE = "require"
TYPE_REQUIRE_DYNAMIC = "require_dynamic"

# Version reported for modules bundled with the runtime
CORE_VERSION = "<core>"

# Route on the webtask cluster that runs a script inside a container
RUN_ENDPOINT = "/api/run/{container}"

# See: https://developer.mozilla.org/en-US/docs/Web/JavaScript/Reference/Global_Objects
PLATFORM_GLOBAL_NAMES: frozenset[str] = frozenset(
    {
        # Value properties
        "Infinity",
        "NaN",
        "undefined",
        "null",
        "globalThis",
        # Function properties
        "eval",
        "isFinite",
        "isNaN",
        "parseFloat",
        "parseInt",
        "decodeURI",
        "decodeURIComponent",
        "encodeURI",
        "encodeURIComponent",
        "escape",
        "unescape",
        # Fundamental objects
        "Object",
        "Function",
        "Boolean",
        "Symbol",
        # Error objects
        "Error",
        "AggregateError",
        "EvalError",
        "InternalError",
        "RangeError",
        "ReferenceError",
        "SyntaxError",
        "TypeError",
        "URIError",
        # Numbers and dates
        "Number",
        "BigInt",
        "Math",
        "Date",
        # Text processing
        "String",
        "RegExp",
        # Indexed collections
        "Array",
        "Int8Array",
        "Uint8Array",
        "Uint8ClampedArray",
        "Int16Array",
        "Uint16Array",
        "Int32Array",
        "Uint32Array",
        "Float32Array",
        "Float64Array",
        "BigInt64Array",
        "BigUint64Array",
        # Keyed collections
        "Map",
        "Set",
        "WeakMap",
        "WeakSet",
        # Structured data
        "ArrayBuffer",
        "SharedArrayBuffer",
        "Atomics",
        "DataView",
        "JSON",
        # Control abstraction objects
        "Promise",
        "Generator",
        "GeneratorFunction",
        "AsyncFunction",
        # Reflection
        "Reflect",
        "Proxy",
        # Other
        "arguments",
        # Node.js globals: https://nodejs.org/api/globals.html
        "Buffer",
        "__dirname",
        "__filename",
        "clearImmediate",
        "clearInterval",
        "clearTimeout",
        "console",
        "exports",
        "global",
        "module",
        "process",
        "require",
        "setImmediate",
        "setInterval",
        "setTimeout",
        "URL",
        "URLSearchParams",
    }
)
