"""antctl: one command line for the agent, controller and flow aggregator."""

__all__: list[str] = []
