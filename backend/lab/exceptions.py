# backend/lab/exceptions.py


class LabError(Exception):
    """A rejected lab action. ``message`` is safe to show to the user."""

    status = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ExperimentNotActive(LabError):
    def __init__(self, message="Start an experiment before using the workbench."):
        super().__init__(message)


class InvalidTransition(LabError):
    pass


class EquipmentNotFound(LabError):
    status = 404

    def __init__(self, equipment_id):
        super().__init__(f"Equipment {equipment_id!r} is not on the workbench.")
        self.equipment_id = equipment_id


class InvalidVolume(LabError):
    pass


class InvalidColor(LabError):
    pass


class AuthenticationRequired(LabError):
    status = 401

    def __init__(self, message="Please sign in to save your experiments."):
        super().__init__(message)


class PersistenceError(Exception):
    """Raised by an experiment store when the remote write fails."""
