from controller.session import DigitizerController, SessionState

__all__ = ["DigitizerController", "SessionState"]
