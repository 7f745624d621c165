class SetupError(Exception):
    "Base class for every failure that stops a provisioning run"

    exit_code = 1


class ConfigError(SetupError):
    pass


class ToolMissing(SetupError):
    pass


class NotAuthenticated(SetupError):
    pass


class ApiCallFailed(SetupError):
    """
    A provider call was rejected.

    ``output`` holds whatever the provider printed or returned, unmodified,
    so it can be shown to the operator as-is.
    """

    def __init__(self, step: str, output: str = ""):
        self.step = step
        self.output = output
        super().__init__(f"{step} failed: {output}" if output else f"{step} failed")


class ConsistencyTimeout(SetupError):
    pass


class CorsConfigurationFailed(ApiCallFailed):
    pass
