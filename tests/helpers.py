"""Small callbacks shared by the engine tests."""


class Boom(Exception):
    """Marker exception raised by failing test steps."""


def raising(message: str = "boom"):
    """Build a step callback that raises ``Boom(message)``."""

    def step(ctx):
        raise Boom(message)

    return step
