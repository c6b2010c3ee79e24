"""
Loading gitrefs as a xonsh xontrib: `xontrib load gitrefs`.

It provides the following in the shell context:
- git_open: Open the repository that owns a path (default: the current directory).
"""

from typing import MutableMapping

from xonsh.built_ins import XonshSession

from xontrib.gitrefs.repository import open_repository
from xontrib.gitrefs.vars import set_env, trace, TRACE_LOAD

_exports = {
    'git_open': open_repository,
}


def _load_xontrib_(xsh: XonshSession, **kwargs) -> dict:
    """
    this function will be called when loading/reloading the xontrib.

    Args:
        xsh: the current xonsh session instance.
        **kwargs: it is empty as of now. Kept for future proofing.
    Returns:
        dict: this will get loaded into the current execution context
    """
    env = xsh.env
    assert isinstance(env, MutableMapping),\
        f"XSH.env is not a MutableMapping: {env!r}"
    env[TRACE_LOAD] = env.get(TRACE_LOAD, False)
    # Trace flags now follow the session's environment.
    set_env(env)
    trace(TRACE_LOAD, "Loaded xontrib-gitrefs")
    return dict(_exports)


def _unload_xontrib_(xsh: XonshSession, **kwargs) -> dict:
    """Clean up on unload."""
    trace(TRACE_LOAD, "Unloading xontrib-gitrefs")
    ctx = xsh.ctx
    assert isinstance(ctx, MutableMapping),\
        f"XSH.ctx is not a MutableMapping: {ctx!r}"
    for name, value in _exports.items():
        if ctx.get(name) is value:
            del ctx[name]
    set_env(None)
    return dict()
