class SwarmSimError(Exception):
    """Base class for recoverable simulator errors."""


class InvalidIndex(SwarmSimError):
    def __init__(self, what: str, index, size: int):
        super().__init__(f"{what} index {index} out of range (size {size})")
        self.what = what
        self.index = index
        self.size = size


class InvalidParameter(SwarmSimError):
    def __init__(self, name: str, value=None, reason: str | None = None):
        if reason is None:
            msg = f"unknown swarm parameter: {name}"
        else:
            msg = f"invalid value for {name}: {value!r} ({reason})"
        super().__init__(msg)
        self.name = name
        self.value = value


class UnknownFormation(SwarmSimError):
    def __init__(self, kind: str):
        super().__init__(f"unknown formation: {kind}")
        self.kind = kind
