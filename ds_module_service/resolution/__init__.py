"""
Backend-agnostic module resolution.

Nothing in here touches the disk or the network directly: every probe goes
through an `exists` coroutine and every path through a `join` callable that
the backends supply.
"""
