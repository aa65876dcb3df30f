from ..runtime import AdapterRuntime, runtime


def get_runtime() -> AdapterRuntime:
    # Overridden in tests via app.dependency_overrides.
    return runtime
