"""
Concrete backends for module lookup.

Both backends expose the same async contract (see `base.ModuleBackend`):
`configure_roots`, `locate_module`, `get_module`, `get_module_path`.
"""
