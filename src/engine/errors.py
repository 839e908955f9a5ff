class FlowError(Exception):
    """Base class for flow engine errors."""


class FlowNotFoundError(FlowError):
    """Raised when a flow name is not registered."""

    def __init__(self, flow_name: str):
        super().__init__(f"Flow '{flow_name}' is not registered")
        self.flow_name = flow_name


class FlowDefinitionError(FlowError):
    """Raised when a flow definition is malformed."""


class FlowExecutionError(FlowError):
    """Raised when the engine is asked to do something the stack cannot support."""
