"""Engine exceptions."""


class SimulationError(RuntimeError):
    """A collaborator failed while simulating a variable.

    Attributes:
        variable: Variable being simulated
        location: Location being simulated, or None for whole-variable failures
    """

    def __init__(self, variable: str, location: int | None, message: str):
        self.variable = variable
        self.location = location
        where = f" at location {location}" if location is not None else ""
        super().__init__(f"Simulation of '{variable}' failed{where}: {message}")
