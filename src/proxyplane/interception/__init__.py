"""Runtime interception: hook dispatch and proxy state."""

from proxyplane.interception.ref import Ref
from proxyplane.interception.state import (
    PROXY_STATE_SLOT,
    Hook,
    ProxyRuntimeState,
    attach,
    clone,
    state_of,
)
from proxyplane.interception.dispatcher import (
    InterceptionOutcome,
    call_wrapped,
    dispatch,
    run_prefix,
    run_suffix,
    snapshot_arguments,
)

__all__ = [
    "Ref",
    "Hook",
    "PROXY_STATE_SLOT",
    "ProxyRuntimeState",
    "attach",
    "clone",
    "state_of",
    "InterceptionOutcome",
    "call_wrapped",
    "dispatch",
    "run_prefix",
    "run_suffix",
    "snapshot_arguments",
]
